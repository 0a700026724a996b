"""Exceptions raised by nuri.

Everything derives from UriError, which is a ValueError so that callers
catching ValueError around a parse keep working.
"""

import enum

from typing import Self


class ParseErrorKind(enum.Enum):
    INVALID_SCHEME = "invalid scheme"
    UNEXPECTED_CHARACTER = "unexpected character"
    INVALID_PERCENT_ENCODING = "invalid percent-encoded octet"
    INVALID_IP_LITERAL = "invalid IP literal"
    INVALID_IPV6 = "invalid IPv6 address"
    INVALID_PORT = "invalid port"
    PATH_AUTHORITY_CONFLICT = "path conflicts with authority"


class DecodeErrorKind(enum.Enum):
    INVALID_OCTET = "invalid percent-encoded octet"
    UNEXPECTED_CHARACTER = "character not allowed unencoded"


class ResolveErrorKind(enum.Enum):
    BASE_NOT_ABSOLUTE = "base is not an absolute URI"


class BuildErrorKind(enum.Enum):
    INVALID_SCHEME = "invalid scheme"
    INVALID_COMPONENT = "improperly encoded component"
    INVALID_HOST = "invalid host"
    INVALID_PORT = "invalid port"
    MISSING_HOST = "userinfo or port given without host"
    PATH_AUTHORITY_CONFLICT = "path must be empty or start with '/' when authority is present"
    PATH_STARTS_WITH_DOUBLE_SLASH = "path must not start with '//' when authority is absent"
    COLON_IN_FIRST_SEGMENT = "first path segment must not contain ':' without scheme or authority"


class UriError(ValueError):
    """Base error for nuri."""


class ParseError(UriError):
    """Raised when a string is not a valid URI-reference."""

    def __init__(self: Self, kind: ParseErrorKind, offset: int, input: str) -> None:
        super().__init__(f"{kind.value} at index {offset}: {input!r}")
        self.kind: ParseErrorKind = kind
        self.offset: int = offset
        self.input: str = input


class DecodeError(UriError):
    """Raised when unvalidated text is not properly percent-encoded."""

    def __init__(self: Self, kind: DecodeErrorKind, offset: int) -> None:
        super().__init__(f"{kind.value} at index {offset}")
        self.kind: DecodeErrorKind = kind
        self.offset: int = offset


class ResolveError(UriError):
    """Raised when a reference cannot be resolved against a base."""

    def __init__(self: Self, kind: ResolveErrorKind) -> None:
        super().__init__(kind.value)
        self.kind: ResolveErrorKind = kind


class BuildError(UriError):
    """Raised by Builder.build when the draft is not a valid URI-reference."""

    def __init__(self: Self, kind: BuildErrorKind, component: str) -> None:
        super().__init__(f"{kind.value} ({component})")
        self.kind: BuildErrorKind = kind
        self.component: str = component
