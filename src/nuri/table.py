"""Byte classification tables for the components of a URI-reference.

Each table answers "may byte B appear unencoded here" for all 256 byte values,
and records whether percent-encoded octets are permitted at all. The tables are
derived once from the character classes of the RFC 3986 ABNF.
"""

import enum
import re

from typing import Self


class Table:
    """A 256-entry bitmap plus a flag allowing percent-encoded octets."""

    __slots__ = ("_map", "_allows_pct", "_pattern")

    def __init__(self: Self, chars: str | bytes = b"", allows_pct: bool = False) -> None:
        if isinstance(chars, str):
            chars = chars.encode("ascii")
        table: bytearray = bytearray(256)
        for b in chars:
            table[b] = 1
        self._map: bytes = bytes(table)
        self._allows_pct: bool = allows_pct
        self._pattern: re.Pattern[str] | None = None

    @classmethod
    def _from_map(cls, mapping: bytes, allows_pct: bool) -> "Table":
        result: Table = cls(allows_pct=allows_pct)
        result._map = mapping
        return result

    def allows(self: Self, b: int) -> bool:
        """Total over every integer: anything outside 0-255 is simply not allowed."""
        return 0 <= b < 256 and self._map[b] == 1

    def allows_char(self: Self, c: str) -> bool:
        return len(c) == 1 and self.allows(ord(c))

    @property
    def allows_pct(self: Self) -> bool:
        return self._allows_pct

    def chars(self: Self) -> str:
        """The characters allowed unencoded, in byte order."""
        return "".join(chr(b) for b in range(256) if self._map[b])

    def __or__(self: Self, other: "Table") -> "Table":
        return Table._from_map(
            bytes(x | y for x, y in zip(self._map, other._map)), self._allows_pct or other._allows_pct
        )

    def __sub__(self: Self, other: "Table") -> "Table":
        return Table._from_map(bytes(x & (1 - y) for x, y in zip(self._map, other._map)), self._allows_pct)

    def with_pct(self: Self) -> "Table":
        return Table._from_map(self._map, True)

    def is_subset(self: Self, other: "Table") -> bool:
        if self._allows_pct and not other._allows_pct:
            return False
        return all(x <= y for x, y in zip(self._map, other._map))

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._map == other._map and self._allows_pct == other._allows_pct

    def __hash__(self: Self) -> int:
        return hash((self._map, self._allows_pct))

    def __repr__(self: Self) -> str:
        return f"Table({self.chars()!r}, allows_pct={self._allows_pct})"

    def pattern(self: Self) -> re.Pattern[str]:
        """A regex matching the longest valid prefix of a string under this table."""
        if self._pattern is None:
            # Only ASCII bytes can ever be allowed, since the grammar is ASCII.
            cls: str = "".join(re.escape(chr(b)) for b in range(128) if self._map[b])
            alternatives: list[str] = []
            if cls:
                alternatives.append(f"[{cls}]")
            if self._allows_pct:
                alternatives.append("%[0-9A-Fa-f]{2}")
            self._pattern = re.compile(f"(?:{'|'.join(alternatives)})*" if alternatives else "")
        return self._pattern

    def validate(self: Self, text: str, start: int = 0, end: int | None = None) -> int | None:
        """Returns the index of the first character in text[start:end] that breaks the table, or None."""
        if end is None:
            end = len(text)
        m: re.Match[str] | None = self.pattern().match(text, start, end)
        stop: int = m.end() if m is not None else start
        return None if stop == end else stop


# ALPHA = %x41-5A / %x61-7A
ALPHA: Table = Table("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")

# DIGIT = %x30-39
DIGIT: Table = Table("0123456789")

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
HEXDIG: Table = DIGIT | Table("ABCDEFabcdef")

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
UNRESERVED: Table = ALPHA | DIGIT | Table("-._~")

# gen-delims = ":" / "/" / "?" / "#" / "[" / "]" / "@"
GEN_DELIMS: Table = Table(":/?#[]@")

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
SUB_DELIMS: Table = Table("!$&'()*+,;=")

# reserved = gen-delims / sub-delims
RESERVED: Table = GEN_DELIMS | SUB_DELIMS

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
SCHEME: Table = ALPHA | DIGIT | Table("+-.")

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
USERINFO: Table = (UNRESERVED | SUB_DELIMS | Table(":")).with_pct()

# reg-name = *( unreserved / pct-encoded / sub-delims )
REG_NAME: Table = (UNRESERVED | SUB_DELIMS).with_pct()

# IPv6address characters, including the dotted ls32 tail
IPV6: Table = HEXDIG | Table(":.")

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
IPVFUTURE: Table = UNRESERVED | SUB_DELIMS | Table(":")

# port = *DIGIT
PORT: Table = DIGIT

# pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
PATH_SEGMENT: Table = (UNRESERVED | SUB_DELIMS | Table(":@")).with_pct()

# path = *( pchar / "/" )
PATH: Table = PATH_SEGMENT | Table("/")

# query = *( pchar / "/" / "?" )
QUERY: Table = PATH_SEGMENT | Table("/?")

# fragment = *( pchar / "/" / "?" )
FRAGMENT: Table = QUERY


class ComponentKind(enum.Enum):
    SCHEME = "scheme"
    USERINFO = "userinfo"
    REG_NAME = "reg-name"
    IPV6 = "IPv6"
    IPVFUTURE = "IPvFuture"
    PORT = "port"
    PATH_SEGMENT = "path segment"
    PATH = "path"
    QUERY = "query"
    FRAGMENT = "fragment"

    @property
    def table(self: Self) -> Table:
        return _TABLES[self]


_TABLES: dict[ComponentKind, Table] = {
    ComponentKind.SCHEME: SCHEME,
    ComponentKind.USERINFO: USERINFO,
    ComponentKind.REG_NAME: REG_NAME,
    ComponentKind.IPV6: IPV6,
    ComponentKind.IPVFUTURE: IPVFUTURE,
    ComponentKind.PORT: PORT,
    ComponentKind.PATH_SEGMENT: PATH_SEGMENT,
    ComponentKind.PATH: PATH,
    ComponentKind.QUERY: QUERY,
    ComponentKind.FRAGMENT: FRAGMENT,
}


def allowed(kind: ComponentKind, b: int) -> bool:
    """Is byte b allowed unencoded in a component of this kind?"""
    return _TABLES[kind].allows(b)
