"""URI-reference values and their component accessors.

A UriRef holds the string it was parsed from together with a ComponentTable of
offsets into that string. Accessors hand out views (Scheme, Authority, EStr) over
the same string instead of copies.
"""

import dataclasses
import enum
import ipaddress

from typing import TYPE_CHECKING, NamedTuple, Self

from nuri import abnf, encoding
from nuri.estring import EStr, _EncodedText
from nuri.table import ComponentKind

if TYPE_CHECKING:
    from nuri.builder import Builder

MAX_PORT: int = 65535


class HostKind(enum.Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"
    IPVFUTURE = "IPvFuture"
    REG_NAME = "reg-name"


@dataclasses.dataclass(frozen=True, slots=True)
class ComponentTable:
    """Offsets of each component within the source string. Absent components are None.

    scheme       = source[:scheme_end]
    userinfo     = source[auth_start:userinfo_end]
    host         = source[host_start:host_end]
    port         = source[port_start:path_start]
    path         = source[path_start:path_end]
    query        = source[query_start:fragment_start - 1] (or to the end)
    fragment     = source[fragment_start:]
    """

    scheme_end: int | None
    auth_start: int | None
    userinfo_end: int | None
    host_start: int
    host_end: int
    host_kind: HostKind
    port_start: int | None
    path_start: int
    path_end: int
    query_start: int | None
    fragment_start: int | None


class AuthorityParts(NamedTuple):
    userinfo: str | None
    host: str
    host_kind: HostKind
    port: str | None


class Scheme:
    """The scheme of a URI-reference. Compares case-insensitively, as RFC 3986 section 3.1 requires."""

    __slots__ = ("_source", "_end")

    def __init__(self: Self, source: str, end: int) -> None:
        self._source: str = source
        self._end: int = end

    def as_str(self: Self) -> str:
        """The scheme exactly as it appears in the source, case preserved."""
        return self._source[: self._end]

    def __str__(self: Self) -> str:
        return self.as_str()

    def __repr__(self: Self) -> str:
        return f"Scheme({self.as_str()!r})"

    def __eq__(self: Self, other: object) -> bool:
        if isinstance(other, Scheme):
            other = other.as_str()
        if isinstance(other, str):
            return self.as_str().lower() == other.lower()
        return NotImplemented

    def __hash__(self: Self) -> int:
        return hash(self.as_str().lower())


@dataclasses.dataclass(frozen=True)
class Host:
    """A parsed host. text is the host as written, brackets included for IP literals."""

    kind: HostKind
    text: str

    def as_str(self: Self) -> str:
        return self.text

    @property
    def address(self: Self) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
        if self.kind is HostKind.IPV4:
            return ipaddress.IPv4Address(self.text)
        if self.kind is HostKind.IPV6:
            return ipaddress.IPv6Address(self.text[1:-1])
        return None

    @property
    def ipvfuture(self: Self) -> tuple[str, str] | None:
        """(version, address) of an IPvFuture literal: "[v7.x:y]" gives ("7", "x:y")."""
        if self.kind is not HostKind.IPVFUTURE:
            return None
        m = abnf.match_ipvfuture(self.text[1:-1])
        assert m is not None
        return m["version"], m["address"]

    @property
    def reg_name(self: Self) -> EStr | None:
        if self.kind is not HostKind.REG_NAME:
            return None
        return EStr._validated(self.text, 0, len(self.text), ComponentKind.REG_NAME)


class Authority:
    """userinfo@host:port"""

    __slots__ = ("_source", "_table")

    def __init__(self: Self, source: str, table: ComponentTable) -> None:
        self._source: str = source
        self._table: ComponentTable = table

    def as_str(self: Self) -> str:
        assert self._table.auth_start is not None
        return self._source[self._table.auth_start : self._table.path_start]

    def __str__(self: Self) -> str:
        return self.as_str()

    def __repr__(self: Self) -> str:
        return f"Authority({self.as_str()!r})"

    def __eq__(self: Self, other: object) -> bool:
        if isinstance(other, Authority):
            return self.as_str() == other.as_str()
        if isinstance(other, str):
            return self.as_str() == other
        return NotImplemented

    def __hash__(self: Self) -> int:
        return hash(self.as_str())

    def userinfo(self: Self) -> EStr | None:
        t: ComponentTable = self._table
        if t.userinfo_end is None:
            return None
        assert t.auth_start is not None
        return EStr._validated(self._source, t.auth_start, t.userinfo_end, ComponentKind.USERINFO)

    def host(self: Self) -> str:
        """The host as written, brackets included for IP literals."""
        return self._source[self._table.host_start : self._table.host_end]

    def host_kind(self: Self) -> HostKind:
        return self._table.host_kind

    def host_parsed(self: Self) -> Host:
        return Host(self._table.host_kind, self.host())

    def port(self: Self) -> str | None:
        """The port as written. "" when the authority ends in a bare ":", None when there is no ":"."""
        if self._table.port_start is None:
            return None
        return self._source[self._table.port_start : self._table.path_start]

    def port_to_int(self: Self) -> int | None:
        """The port as an integer. None if the port is absent or empty. ValueError above 65535."""
        port: str | None = self.port()
        if not port:
            return None
        value: int = int(port, base=10)
        if value > MAX_PORT:
            raise ValueError(f"port out of range: {port}")
        return value

    def _parts(self: Self) -> AuthorityParts:
        userinfo: EStr | None = self.userinfo()
        return AuthorityParts(
            userinfo=userinfo.as_str() if userinfo is not None else None,
            host=self.host(),
            host_kind=self._table.host_kind,
            port=self.port(),
        )


@dataclasses.dataclass(frozen=True)
class UriRef:
    """A URI-reference. Create one with nuri.parse() or nuri.Builder, never directly."""

    _source: str
    _table: ComponentTable = dataclasses.field(compare=False)

    @classmethod
    def parse(cls, text: str) -> "UriRef":
        from nuri.parser import parse

        return parse(text)

    def as_str(self: Self) -> str:
        return self._source

    def __str__(self: Self) -> str:
        return self._source

    def __repr__(self: Self) -> str:
        return f"UriRef({self._source!r})"

    def scheme(self: Self) -> Scheme | None:
        if self._table.scheme_end is None:
            return None
        return Scheme(self._source, self._table.scheme_end)

    def authority(self: Self) -> Authority | None:
        if self._table.auth_start is None:
            return None
        return Authority(self._source, self._table)

    def path(self: Self) -> EStr:
        return EStr._validated(self._source, self._table.path_start, self._table.path_end, ComponentKind.PATH)

    def query(self: Self) -> EStr | None:
        t: ComponentTable = self._table
        if t.query_start is None:
            return None
        end: int = t.fragment_start - 1 if t.fragment_start is not None else len(self._source)
        return EStr._validated(self._source, t.query_start, end, ComponentKind.QUERY)

    def fragment(self: Self) -> EStr | None:
        t: ComponentTable = self._table
        if t.fragment_start is None:
            return None
        return EStr._validated(self._source, t.fragment_start, len(self._source), ComponentKind.FRAGMENT)

    def has_scheme(self: Self) -> bool:
        return self._table.scheme_end is not None

    def has_authority(self: Self) -> bool:
        return self._table.auth_start is not None

    def has_query(self: Self) -> bool:
        return self._table.query_start is not None

    def has_fragment(self: Self) -> bool:
        return self._table.fragment_start is not None

    def is_absolute_uri(self: Self) -> bool:
        """absolute-URI = scheme ":" hier-part [ "?" query ]"""
        return self.has_scheme() and not self.has_fragment()

    def normalize(self: Self) -> "UriRef":
        from nuri.normalize import normalize

        return normalize(self)

    def resolve_against(self: Self, base: "UriRef") -> "UriRef":
        from nuri.resolve import resolve

        return resolve(self, base)

    def builder(self: Self) -> "Builder":
        """A Builder pre-filled with the components of this reference."""
        from nuri.builder import Builder

        return Builder.from_uri(self)

    def with_fragment(self: Self, fragment: str | _EncodedText | None) -> "UriRef":
        """Returns a copy with the fragment replaced. A str must already be percent-encoded."""
        if isinstance(fragment, str):
            encoding.validate(fragment, ComponentKind.FRAGMENT)
        elif fragment is not None:
            if not fragment.kind.table.is_subset(ComponentKind.FRAGMENT.table):
                raise ValueError(f"{fragment.kind.value} cannot be used as a fragment")
            fragment = fragment.as_str()
        return self._replace_fragment(fragment)

    def strip_fragment(self: Self) -> "UriRef":
        if not self.has_fragment():
            return self
        return self._replace_fragment(None)

    def _parts(self: Self) -> tuple[str | None, AuthorityParts | None, str, str | None, str | None]:
        scheme: Scheme | None = self.scheme()
        authority: Authority | None = self.authority()
        query: EStr | None = self.query()
        fragment: EStr | None = self.fragment()
        return (
            scheme.as_str() if scheme is not None else None,
            authority._parts() if authority is not None else None,
            self.path().as_str(),
            query.as_str() if query is not None else None,
            fragment.as_str() if fragment is not None else None,
        )

    def _replace_fragment(self: Self, fragment: str | None) -> "UriRef":
        scheme, authority, path, query, _ = self._parts()
        return compose(scheme, authority, path, query, fragment)


def compose(
    scheme: str | None,
    authority: AuthorityParts | None,
    path: str,
    query: str | None,
    fragment: str | None,
) -> UriRef:
    """Component recomposition, RFC 3986 section 5.3.
    Every part must already be valid for its component and the parts together must
    satisfy the structural rules; the offsets are recorded as the string is assembled.
    """
    buf: list[str] = []
    pos: int = 0

    def push(s: str) -> None:
        nonlocal pos
        buf.append(s)
        pos += len(s)

    scheme_end: int | None = None
    if scheme is not None:
        push(scheme)
        scheme_end = pos
        push(":")

    auth_start: int | None = None
    userinfo_end: int | None = None
    host_start: int = 0
    host_end: int = 0
    host_kind: HostKind = HostKind.REG_NAME
    port_start: int | None = None
    if authority is not None:
        push("//")
        auth_start = pos
        if authority.userinfo is not None:
            push(authority.userinfo)
            userinfo_end = pos
            push("@")
        host_start = pos
        push(authority.host)
        host_end = pos
        host_kind = authority.host_kind
        if authority.port is not None:
            push(":")
            port_start = pos
            push(authority.port)

    path_start: int = pos
    push(path)
    path_end: int = pos

    query_start: int | None = None
    if query is not None:
        push("?")
        query_start = pos
        push(query)

    fragment_start: int | None = None
    if fragment is not None:
        push("#")
        fragment_start = pos
        push(fragment)

    return UriRef(
        "".join(buf),
        ComponentTable(
            scheme_end=scheme_end,
            auth_start=auth_start,
            userinfo_end=userinfo_end,
            host_start=host_start,
            host_end=host_end,
            host_kind=host_kind,
            port_start=port_start,
            path_start=path_start,
            path_end=path_end,
            query_start=query_start,
            fragment_start=fragment_start,
        ),
    )
