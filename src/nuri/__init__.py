__version__ = "0.1"

from .builder import Builder
from .encoding import decode, decode_lossy, decode_str, decode_triplet, encode, encode_byte
from .errors import BuildError, BuildErrorKind, DecodeError, DecodeErrorKind, ParseError, ParseErrorKind, ResolveError, ResolveErrorKind, UriError
from .estring import Decode, EStr, EString
from .normalize import normalize
from .parser import parse
from .resolve import remove_dot_segments, resolve
from .table import ComponentKind, Table, allowed
from .uri import Authority, Host, HostKind, Scheme, UriRef
