"""Percent-encoded strings tagged with the kind of component they belong to.

EStr is a view: it keeps a reference to the string it was sliced from together with
the bounds of the slice, and only copies when asked for its text. EString is the owned
counterpart, a growable buffer that stays properly encoded after every mutation.
Both share the read-only operations of _EncodedText.
"""

from typing import Self

from nuri import encoding
from nuri.table import RESERVED, ComponentKind

# Splitting on anything but a reserved character could cut a triplet in half or
# split on a character that means the same thing encoded.
SPLIT_DELIMITERS: str = RESERVED.chars()


def _check_delimiter(delim: str) -> None:
    if len(delim) != 1 or delim not in SPLIT_DELIMITERS:
        raise ValueError(f"splitting with non-reserved character {delim!r}")


class Decode:
    """The result of percent-decoding an EStr or EString."""

    __slots__ = ("_text", "_data")

    def __init__(self: Self, text: str) -> None:
        self._text: str | None = text if "%" not in text else None
        self._data: bytes = encoding.decode(text)

    @property
    def decoded(self: Self) -> bool:
        """Whether any triplet was decoded."""
        return self._text is None

    def as_bytes(self: Self) -> bytes:
        return self._data

    def as_str(self: Self) -> str:
        """Strict UTF-8 interpretation of the decoded octets. Raises UnicodeDecodeError."""
        if self._text is not None:
            return self._text
        return self._data.decode("utf-8")

    def as_str_lossy(self: Self) -> str:
        """UTF-8 interpretation with invalid sequences replaced by U+FFFD."""
        if self._text is not None:
            return self._text
        return self._data.decode("utf-8", errors="replace")

    def __repr__(self: Self) -> str:
        return f"Decode({self._data!r})"


class _EncodedText:
    """Read-only operations shared by EStr and EString."""

    __slots__ = ()

    kind: ComponentKind

    def as_str(self: Self) -> str:
        raise NotImplementedError

    def as_bytes(self: Self) -> bytes:
        return self.as_str().encode("ascii")

    def decode(self: Self) -> Decode:
        return Decode(self.as_str())

    def split(self: Self, delim: str) -> list["EStr"]:
        """Splits on every occurrence of delim, which must be a reserved character.
        EStr.new("a,b,c", k).split(",") gives ["a", "b", "c"]; "," gives ["", ""].
        """
        _check_delimiter(delim)
        source, start, end = self._bounds()
        result: list[EStr] = []
        while True:
            i: int = source.find(delim, start, end)
            if i == -1:
                result.append(EStr._validated(source, start, end, self.kind))
                return result
            result.append(EStr._validated(source, start, i, self.kind))
            start = i + 1

    def split_once(self: Self, delim: str) -> tuple["EStr", "EStr"] | None:
        """Splits at the first delim. None if delim does not occur."""
        _check_delimiter(delim)
        source, start, end = self._bounds()
        i: int = source.find(delim, start, end)
        if i == -1:
            return None
        return EStr._validated(source, start, i, self.kind), EStr._validated(source, i + 1, end, self.kind)

    def rsplit_once(self: Self, delim: str) -> tuple["EStr", "EStr"] | None:
        """Splits at the last delim. None if delim does not occur."""
        _check_delimiter(delim)
        source, start, end = self._bounds()
        i: int = source.rfind(delim, start, end)
        if i == -1:
            return None
        return EStr._validated(source, start, i, self.kind), EStr._validated(source, i + 1, end, self.kind)

    def _bounds(self: Self) -> tuple[str, int, int]:
        text: str = self.as_str()
        return text, 0, len(text)

    def __str__(self: Self) -> str:
        return self.as_str()

    def __len__(self: Self) -> int:
        return len(self.as_str())

    def __bool__(self: Self) -> bool:
        return len(self) > 0

    def __eq__(self: Self, other: object) -> bool:
        # No normalization happens before comparing.
        if isinstance(other, str):
            return self.as_str() == other
        if isinstance(other, _EncodedText):
            return self.as_str() == other.as_str()
        return NotImplemented

    def __lt__(self: Self, other: object) -> bool:
        if isinstance(other, _EncodedText):
            return self.as_str() < other.as_str()
        return NotImplemented

    def __hash__(self: Self) -> int:
        return hash(self.as_str())


class EStr(_EncodedText):
    """A properly percent-encoded slice of a string, tagged with its component kind."""

    __slots__ = ("_source", "_start", "_end", "kind")

    def __init__(self: Self) -> None:
        raise TypeError("use EStr.new() to create an EStr")

    @classmethod
    def _validated(cls, source: str, start: int, end: int, kind: ComponentKind) -> "EStr":
        """Wraps source[start:end] without checking it. Callers guarantee validity."""
        result: EStr = object.__new__(cls)
        result._source = source
        result._start = start
        result._end = end
        result.kind = kind
        return result

    @classmethod
    def new(cls, text: str, kind: ComponentKind) -> "EStr":
        """Wraps text, raising DecodeError unless it is properly encoded for kind."""
        encoding.validate(text, kind)
        return cls._validated(text, 0, len(text), kind)

    def as_str(self: Self) -> str:
        if self._start == 0 and self._end == len(self._source):
            return self._source
        return self._source[self._start : self._end]

    def _bounds(self: Self) -> tuple[str, int, int]:
        return self._source, self._start, self._end

    def __len__(self: Self) -> int:
        return self._end - self._start

    def to_owned(self: Self) -> "EString":
        """Copies the view into a new buffer of the same kind."""
        result: EString = EString(self.kind) if self.kind.table.allows_pct else EString._unchecked(self.kind)
        result._buf.append(self.as_str())
        return result

    def __repr__(self: Self) -> str:
        return f"EStr({self.as_str()!r}, {self.kind})"

    # Path views

    def is_absolute(self: Self) -> bool:
        """True if the path starts with "/"."""
        return self._source.startswith("/", self._start, self._end)

    def is_rootless(self: Self) -> bool:
        return not self.is_absolute()

    def segments(self: Self) -> list["EStr"]:
        """The path segments. An empty path has none, and a leading "/" does not start one:
        "/path/to//dir/" gives ["path", "to", "", "dir", ""].
        """
        if self._start == self._end:
            return []
        pos: int = self._start + 1 if self.is_absolute() else self._start
        result: list[EStr] = []
        while True:
            i: int = self._source.find("/", pos, self._end)
            if i == -1:
                result.append(EStr._validated(self._source, pos, self._end, ComponentKind.PATH_SEGMENT))
                return result
            result.append(EStr._validated(self._source, pos, i, ComponentKind.PATH_SEGMENT))
            pos = i + 1


class EString(_EncodedText):
    """A growable, owned, properly percent-encoded string."""

    __slots__ = ("_buf", "kind")

    # Mutable, so not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __init__(self: Self, kind: ComponentKind) -> None:
        if not kind.table.allows_pct:
            raise ValueError(f"{kind.value} does not allow percent-encoding")
        self._buf: list[str] = []
        self.kind: ComponentKind = kind

    @classmethod
    def _unchecked(cls, kind: ComponentKind) -> "EString":
        result: EString = object.__new__(cls)
        result._buf = []
        result.kind = kind
        return result

    @classmethod
    def from_str(cls, text: str, kind: ComponentKind) -> "EString":
        """Copies already-encoded text into a new buffer, raising DecodeError if it is not valid for kind."""
        encoding.validate(text, kind)
        result: EString = cls(kind)
        result._buf.append(text)
        return result

    def _check_subset(self: Self, kind: ComponentKind) -> None:
        if not kind.table.is_subset(self.kind.table):
            raise ValueError(f"{kind.value} is not a subset of {self.kind.value}")

    def push_byte(self: Self, b: int) -> None:
        """Appends b, percent-encoded if it is not allowed literally."""
        if not 0 <= b < 256:
            raise ValueError(f"not a byte: {b}")
        self._buf.append(encoding.encode_byte(b, self.kind))

    def encode(self: Self, data: str | bytes, kind: ComponentKind | None = None) -> None:
        """Appends the percent-encoded form of data, encoded with kind (the buffer's own kind by default).
        kind must not allow anything the buffer's kind does not.
        """
        if kind is None:
            kind = self.kind
        else:
            self._check_subset(kind)
        self._buf.append(encoding.encode(data, kind))

    def push_estr(self: Self, view: _EncodedText) -> None:
        """Appends an already-encoded view verbatim."""
        self._check_subset(view.kind)
        self._buf.append(view.as_str())

    def clear(self: Self) -> None:
        self._buf.clear()

    def as_str(self: Self) -> str:
        if len(self._buf) > 1:
            self._buf[:] = ["".join(self._buf)]
        return self._buf[0] if self._buf else ""

    def as_view(self: Self) -> EStr:
        """A view over a snapshot of the buffer. Later mutations do not affect it."""
        text: str = self.as_str()
        return EStr._validated(text, 0, len(text), self.kind)

    def segments(self: Self) -> list[EStr]:
        return self.as_view().segments()

    def is_absolute(self: Self) -> bool:
        return self.as_str().startswith("/")

    def is_rootless(self: Self) -> bool:
        return not self.is_absolute()

    def __repr__(self: Self) -> str:
        return f"EString({self.as_str()!r}, {self.kind})"
