"""Assembling URI-references from components.

A Builder is a mutable draft. Setters only record values; build() checks every
component and the rules that tie them together, since those cannot be checked
while the draft is still incomplete (the path may be set before the authority).
"""

import dataclasses
import ipaddress
import logging

from typing import Self

from nuri import abnf
from nuri.errors import BuildError, BuildErrorKind
from nuri.estring import _EncodedText
from nuri.table import PATH, PORT, QUERY, FRAGMENT, REG_NAME, USERINFO, ComponentKind, Table
from nuri.uri import MAX_PORT, Authority, AuthorityParts, HostKind, UriRef, compose

logger = logging.getLogger(__name__)

Component = str | _EncodedText


def _fail(kind: BuildErrorKind, component: str) -> BuildError:
    logger.debug("rejected URI-reference draft: %s (%s)", kind.value, component)
    return BuildError(kind, component)


def _text(value: Component, kind: ComponentKind) -> str:
    if isinstance(value, str):
        return value
    if not value.kind.table.is_subset(kind.table):
        raise TypeError(f"a {value.kind.value} cannot be used as a {kind.value}")
    return value.as_str()


def _check(table: Table, text: str, component: str, kind: BuildErrorKind = BuildErrorKind.INVALID_COMPONENT) -> None:
    if table.validate(text) is not None:
        raise _fail(kind, component)


def _classify_host(host: str) -> HostKind:
    if host.startswith("["):
        if not host.endswith("]"):
            raise _fail(BuildErrorKind.INVALID_HOST, "host")
        inner: str = host[1:-1]
        if abnf.is_ipv6(inner):
            return HostKind.IPV6
        if abnf.match_ipvfuture(inner) is not None:
            return HostKind.IPVFUTURE
        raise _fail(BuildErrorKind.INVALID_HOST, "host")
    if abnf.is_ipv4(host):
        return HostKind.IPV4
    _check(REG_NAME, host, "host", BuildErrorKind.INVALID_HOST)
    return HostKind.REG_NAME


@dataclasses.dataclass
class Builder:
    """Draft of a URI-reference.

    >>> Builder().scheme("foo").host("example.com").port(8042).path("/over/there").build()
    UriRef('foo://example.com:8042/over/there')

    Strings passed to the setters must already be percent-encoded; use EString to encode raw text.
    """

    _scheme: str | None = None
    _userinfo: str | None = None
    _host: str | None = None
    _port: str | None = None
    _path: str = ""
    _query: str | None = None
    _fragment: str | None = None

    @classmethod
    def from_uri(cls, uri: UriRef) -> "Builder":
        scheme, authority, path, query, fragment = uri._parts()
        result: Builder = cls(_scheme=scheme, _path=path, _query=query, _fragment=fragment)
        if authority is not None:
            result._userinfo, result._host, _, result._port = authority
        return result

    def scheme(self: Self, scheme: str | None) -> Self:
        self._scheme = scheme
        return self

    def authority(self: Self, authority: Authority | None) -> Self:
        """Copies userinfo, host and port from an existing authority, or removes all three."""
        if authority is None:
            self._userinfo = self._host = self._port = None
            return self
        parts: AuthorityParts = authority._parts()
        self._userinfo, self._host, _, self._port = parts
        return self

    def userinfo(self: Self, userinfo: Component | None) -> Self:
        self._userinfo = _text(userinfo, ComponentKind.USERINFO) if userinfo is not None else None
        return self

    def host(self: Self, host: str | ipaddress.IPv4Address | ipaddress.IPv6Address | None) -> Self:
        """A reg-name, a dotted IPv4 address, a bracketed IP literal, or an ipaddress object."""
        if isinstance(host, ipaddress.IPv6Address):
            host = f"[{host.compressed}]"
        elif isinstance(host, ipaddress.IPv4Address):
            host = str(host)
        self._host = host
        return self

    def port(self: Self, port: int | str | None) -> Self:
        if isinstance(port, int):
            if not 0 <= port <= MAX_PORT:
                raise _fail(BuildErrorKind.INVALID_PORT, "port")
            port = str(port)
        self._port = port
        return self

    def path(self: Self, path: Component) -> Self:
        self._path = _text(path, ComponentKind.PATH)
        return self

    def query(self: Self, query: Component | None) -> Self:
        self._query = _text(query, ComponentKind.QUERY) if query is not None else None
        return self

    def fragment(self: Self, fragment: Component | None) -> Self:
        self._fragment = _text(fragment, ComponentKind.FRAGMENT) if fragment is not None else None
        return self

    def build(self: Self) -> UriRef:
        """Checks the draft and returns the URI-reference it describes. Raises BuildError."""
        if self._scheme is not None and not abnf.is_scheme(self._scheme):
            raise _fail(BuildErrorKind.INVALID_SCHEME, "scheme")

        authority: AuthorityParts | None = None
        if self._host is not None:
            host_kind: HostKind = _classify_host(self._host)
            if self._userinfo is not None:
                _check(USERINFO, self._userinfo, "userinfo")
            if self._port is not None:
                _check(PORT, self._port, "port", BuildErrorKind.INVALID_PORT)
            authority = AuthorityParts(self._userinfo, self._host, host_kind, self._port)
        elif self._userinfo is not None:
            raise _fail(BuildErrorKind.MISSING_HOST, "userinfo")
        elif self._port is not None:
            raise _fail(BuildErrorKind.MISSING_HOST, "port")

        _check(PATH, self._path, "path")
        if self._query is not None:
            _check(QUERY, self._query, "query")
        if self._fragment is not None:
            _check(FRAGMENT, self._fragment, "fragment")

        if authority is not None:
            if self._path and not self._path.startswith("/"):
                raise _fail(BuildErrorKind.PATH_AUTHORITY_CONFLICT, "path")
        else:
            if self._path.startswith("//"):
                raise _fail(BuildErrorKind.PATH_STARTS_WITH_DOUBLE_SLASH, "path")
            if self._scheme is None and ":" in self._path.partition("/")[0]:
                raise _fail(BuildErrorKind.COLON_IN_FIRST_SEGMENT, "path")

        return compose(self._scheme, authority, self._path, self._query, self._fragment)
