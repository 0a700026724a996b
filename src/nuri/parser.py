"""RFC 3986-compliant URI-reference parser.

URI-reference = URI / relative-ref

The input is scanned once, left to right. Nothing is copied: the result records the
offsets of each component in the input. The first violation of the grammar raises a
ParseError carrying its kind and the index of the offending character.
"""

import logging
import re

from nuri import abnf
from nuri.errors import ParseError, ParseErrorKind
from nuri.table import ALPHA, PATH, PORT, QUERY, FRAGMENT, REG_NAME, SCHEME, USERINFO, Table
from nuri.uri import ComponentTable, HostKind, UriRef

logger = logging.getLogger(__name__)

# The scheme, if any, ends at the first ":" that comes before any "/", "?" or "#".
_SCHEME_END_PAT: re.Pattern[str] = re.compile(r"[:/?#]")

# authority = [ userinfo "@" ] host [ ":" port ], terminated by the path, query or fragment.
_AUTHORITY_END_PAT: re.Pattern[str] = re.compile(r"[/?#]")

_PATH_END_PAT: re.Pattern[str] = re.compile(r"[?#]")


def _check(table: Table, text: str, start: int, end: int) -> None:
    bad: int | None = table.validate(text, start, end)
    if bad is None:
        return
    if text[bad] == "%" and table.allows_pct:
        raise ParseError(ParseErrorKind.INVALID_PERCENT_ENCODING, bad, text)
    raise ParseError(ParseErrorKind.UNEXPECTED_CHARACTER, bad, text)


def _parse_scheme(text: str) -> int | None:
    """Returns the index of the ":" ending the scheme, or None if there is no scheme.
    A ":" before the first "/", "?" or "#" can only end a scheme: in a relative-ref it
    would put a colon into the first segment of a path-noscheme.
    """
    m: re.Match[str] | None = _SCHEME_END_PAT.search(text)
    if m is None or m[0] != ":":
        return None
    end: int = m.start()
    if end == 0 or not ALPHA.allows_char(text[0]):
        raise ParseError(ParseErrorKind.INVALID_SCHEME, 0, text)
    bad: int | None = SCHEME.validate(text, 1, end)
    if bad is not None:
        raise ParseError(ParseErrorKind.INVALID_SCHEME, bad, text)
    return end


def _parse_ip_literal(text: str, start: int, end: int) -> tuple[int, HostKind]:
    """IP-literal = "[" ( IPv6address / IPvFuture ) "]"
    text[start] is "[". Returns the index just past "]" and the kind of the literal.
    """
    close: int = text.find("]", start, end)
    if close == -1:
        raise ParseError(ParseErrorKind.INVALID_IP_LITERAL, start, text)
    inner: str = text[start + 1 : close]
    if inner[:1] in ("v", "V"):
        if abnf.match_ipvfuture(inner) is None:
            raise ParseError(ParseErrorKind.INVALID_IP_LITERAL, start + 1, text)
        return close + 1, HostKind.IPVFUTURE
    if not abnf.is_ipv6(inner):
        raise ParseError(ParseErrorKind.INVALID_IPV6, start + 1, text)
    return close + 1, HostKind.IPV6


def parse_components(text: str) -> ComponentTable:
    """Validates text as a URI-reference and returns the offsets of its components."""
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    length: int = len(text)

    scheme_end: int | None = _parse_scheme(text)
    pos: int = scheme_end + 1 if scheme_end is not None else 0

    auth_start: int | None = None
    userinfo_end: int | None = None
    host_start: int = 0
    host_end: int = 0
    host_kind: HostKind = HostKind.REG_NAME
    port_start: int | None = None

    if text.startswith("//", pos):
        auth_start = pos + 2
        m: re.Match[str] | None = _AUTHORITY_END_PAT.search(text, auth_start)
        auth_end: int = m.start() if m is not None else length

        # userinfo cannot contain "@", so the last one in the authority ends it.
        at: int = text.rfind("@", auth_start, auth_end)
        if at != -1:
            _check(USERINFO, text, auth_start, at)
            userinfo_end = at
            host_start = at + 1
        else:
            host_start = auth_start

        if text.startswith("[", host_start, auth_end):
            host_end, host_kind = _parse_ip_literal(text, host_start, auth_end)
            if host_end < auth_end:
                if text[host_end] != ":":
                    raise ParseError(ParseErrorKind.UNEXPECTED_CHARACTER, host_end, text)
                port_start = host_end + 1
        else:
            colon: int = text.rfind(":", host_start, auth_end)
            if colon != -1:
                host_end = colon
                port_start = colon + 1
            else:
                host_end = auth_end
            if abnf.is_ipv4(text[host_start:host_end]):
                host_kind = HostKind.IPV4
            else:
                _check(REG_NAME, text, host_start, host_end)

        if port_start is not None:
            bad: int | None = PORT.validate(text, port_start, auth_end)
            if bad is not None:
                raise ParseError(ParseErrorKind.INVALID_PORT, bad, text)
        pos = auth_end

    path_start: int = pos
    m = _PATH_END_PAT.search(text, pos)
    path_end: int = m.start() if m is not None else length
    _check(PATH, text, path_start, path_end)
    pos = path_end

    query_start: int | None = None
    if pos < length and text[pos] == "?":
        query_start = pos + 1
        end: int = text.find("#", query_start)
        pos = end if end != -1 else length
        _check(QUERY, text, query_start, pos)

    fragment_start: int | None = None
    if pos < length:
        # Only "#" can be left here.
        fragment_start = pos + 1
        _check(FRAGMENT, text, fragment_start, length)

    table: ComponentTable = ComponentTable(
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
    )
    check_structure(text, table)
    return table


def check_structure(text: str, table: ComponentTable) -> None:
    """The rules that involve more than one component:
    with an authority, the path is path-abempty; without one, it must not start with "//";
    without scheme or authority, its first segment must not contain ":".
    """
    path: str = text[table.path_start : table.path_end]
    if table.auth_start is not None:
        if path and not path.startswith("/"):
            raise ParseError(ParseErrorKind.PATH_AUTHORITY_CONFLICT, table.path_start, text)
        return
    if path.startswith("//"):
        raise ParseError(ParseErrorKind.PATH_AUTHORITY_CONFLICT, table.path_start, text)
    if table.scheme_end is None:
        colon: int = path.find(":")
        if colon != -1 and "/" not in path[:colon]:
            raise ParseError(ParseErrorKind.INVALID_SCHEME, table.path_start + colon, text)


def parse(text: str) -> UriRef:
    """Parses text as a URI-reference. Raises ParseError if it is not one.
    The result keeps text as is: parse(s).as_str() == s.
    """
    try:
        table: ComponentTable = parse_components(text)
    except ParseError as e:
        logger.debug("rejected URI-reference %r: %s at index %d", text, e.kind.value, e.offset)
        raise
    return UriRef(text, table)
