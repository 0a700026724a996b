"""Percent-encoding and decoding of octets (RFC 3986 section 2.1)."""

import re

from nuri.errors import DecodeError, DecodeErrorKind
from nuri.table import UNRESERVED, ComponentKind, Table

_HEX_DIGITS: str = "0123456789ABCDEF"

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED_PAT: re.Pattern[str] = re.compile(r"%[0-9A-Fa-f]{2}")

# Hex value of every ASCII hex digit, in either case.
_HEX_VALUES: dict[str, int] = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def _table_of(kind: ComponentKind | Table) -> Table:
    return kind if isinstance(kind, Table) else kind.table


def pct_encode(b: int) -> str:
    """The "%XX" triplet for byte b, with uppercase hex digits."""
    return f"%{_HEX_DIGITS[b >> 4]}{_HEX_DIGITS[b & 0x0F]}"


def encode_byte(b: int, kind: ComponentKind | Table) -> str:
    """Returns b as a literal character if kind allows it, otherwise as a "%XX" triplet."""
    table: Table = _table_of(kind)
    if table.allows(b):
        return chr(b)
    if not table.allows_pct:
        raise ValueError(f"byte {b:#04x} cannot be represented in a component that forbids percent-encoding")
    return pct_encode(b)


def encode(data: str | bytes, kind: ComponentKind | Table) -> str:
    """Percent-encodes data for use as (part of) a component of the given kind.
    Text is encoded as UTF-8 first.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return "".join(encode_byte(b, kind) for b in data)


def decode_triplet(h1: str, h2: str) -> int:
    """Decodes the two hex digits following a "%". Either case is accepted."""
    hi: int | None = _HEX_VALUES.get(h1)
    lo: int | None = _HEX_VALUES.get(h2)
    if hi is None or lo is None:
        raise DecodeError(DecodeErrorKind.INVALID_OCTET, 0)
    return (hi << 4) | lo


def decode(text: str) -> bytes:
    """Decodes every "%XX" triplet in text; everything else passes through as UTF-8."""
    if "%" not in text:
        return text.encode("utf-8")
    result: bytearray = bytearray()
    pos: int = 0
    while True:
        i: int = text.find("%", pos)
        if i == -1:
            result += text[pos:].encode("utf-8")
            return bytes(result)
        result += text[pos:i].encode("utf-8")
        if i + 3 > len(text):
            raise DecodeError(DecodeErrorKind.INVALID_OCTET, i)
        try:
            result.append(decode_triplet(text[i + 1], text[i + 2]))
        except DecodeError:
            raise DecodeError(DecodeErrorKind.INVALID_OCTET, i) from None
        pos = i + 3


def decode_lossy(text: str) -> str:
    """Decodes text and interprets the octets as UTF-8, replacing invalid sequences with U+FFFD."""
    return decode(text).decode("utf-8", errors="replace")


def decode_str(text: str) -> str:
    """Decodes text and interprets the octets as UTF-8, raising UnicodeDecodeError if they are not."""
    return decode(text).decode("utf-8")


def validate(text: str, kind: ComponentKind | Table) -> None:
    """Raises DecodeError unless text is properly encoded for kind."""
    table: Table = _table_of(kind)
    bad: int | None = table.validate(text)
    if bad is None:
        return
    if text[bad] == "%" and table.allows_pct:
        raise DecodeError(DecodeErrorKind.INVALID_OCTET, bad)
    raise DecodeError(DecodeErrorKind.UNEXPECTED_CHARACTER, bad)


def normalize_triplets(text: str, lowercase: bool = False) -> str:
    """Uppercases the hex digits of every triplet and decodes triplets of unreserved characters
    (RFC 3986 sections 6.2.2.1 and 6.2.2.2). With lowercase, literal letters are lowercased as well.
    text must already be properly encoded.
    """

    def _fix(m: re.Match[str]) -> str:
        b: int = int(m[0][1:], 16)
        if UNRESERVED.allows(b):
            c: str = chr(b)
            return c.lower() if lowercase else c
        return m[0].upper()

    if lowercase:
        # Triplets are uppercased again by _fix, so lowering everything first is safe.
        text = text.lower()
    if "%" not in text:
        return text
    return _PCT_ENCODED_PAT.sub(_fix, text)
