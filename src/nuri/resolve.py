"""Reference resolution, RFC 3986 section 5.2."""

import logging

from nuri.errors import ResolveError, ResolveErrorKind
from nuri.estring import EStr
from nuri.uri import Authority, AuthorityParts, UriRef, compose

logger = logging.getLogger(__name__)


def remove_dot_segments(path: str) -> str:
    """Implementation of the "remove_dot_segments" routine from RFC 3986 section 5.2.4

    The input buffer is consumed by index and the output buffer is a stack of segments,
    each holding its leading "/" if it had one, so every step is constant work and the
    whole routine is linear in the length of the path.
    """
    output: list[str] = []
    i: int = 0
    n: int = len(path)
    while i < n:
        if path.startswith("../", i):
            i += 3
        elif path.startswith("./", i):
            i += 2
        elif path.startswith("/./", i):
            i += 2
        elif i + 2 == n and path.startswith("/.", i):
            output.append("/")
            i = n
        elif path.startswith("/../", i):
            i += 3
            if output:
                output.pop()
        elif i + 3 == n and path.startswith("/..", i):
            if output:
                output.pop()
            output.append("/")
            i = n
        elif n - i <= 2 and path[i:] in (".", ".."):
            i = n
        else:
            j: int = path.find("/", i + 1 if path[i] == "/" else i)
            if j == -1:
                j = n
            output.append(path[i:j])
            i = j
    return "".join(output)


def merge(base: UriRef, path: str) -> str:
    """Implementation of the "merge" routine defined in RFC 3986 section 5.2.3"""
    base_path: str = base.path().as_str()
    if base.has_authority() and len(base_path) == 0:
        return f"/{path}"
    dirname, slash, _ = base_path.rpartition("/")
    return dirname + slash + path


def _authority_parts(authority: Authority | None) -> AuthorityParts | None:
    return authority._parts() if authority is not None else None


def _text(view: EStr | None) -> str | None:
    return view.as_str() if view is not None else None


def resolve(reference: UriRef, base: UriRef) -> UriRef:
    """Implementation of the "Transform References" algorithm from RFC 3986 section 5.2.2
    (strict: a reference whose scheme equals the base's is not treated as relative).

    base must have a scheme. Its fragment, if any, is ignored.
    """
    if not base.has_scheme():
        logger.debug("cannot resolve %r against %r: base has no scheme", reference.as_str(), base.as_str())
        raise ResolveError(ResolveErrorKind.BASE_NOT_ABSOLUTE)

    scheme: str | None
    authority: AuthorityParts | None
    path: str
    query: str | None

    # This follows the pseudocode in the RFC branch for branch,
    # so it can be checked against it line by line.
    r_path: str = reference.path().as_str()
    if reference.has_scheme():
        scheme = str(reference.scheme())
        authority = _authority_parts(reference.authority())
        path = remove_dot_segments(r_path)
        query = _text(reference.query())
    else:
        if reference.has_authority():
            authority = _authority_parts(reference.authority())
            path = remove_dot_segments(r_path)
            query = _text(reference.query())
        else:
            if len(r_path) == 0:
                path = base.path().as_str()
                if reference.has_query():
                    query = _text(reference.query())
                else:
                    query = _text(base.query())
            else:
                if r_path.startswith("/"):
                    path = remove_dot_segments(r_path)
                else:
                    path = merge(base, r_path)
                    path = remove_dot_segments(path)
                query = _text(reference.query())
            authority = _authority_parts(base.authority())
        scheme = str(base.scheme())
    fragment: str | None = _text(reference.fragment())

    # "a:/x/..//y" would otherwise come out as "a://y", which has an authority.
    if authority is None and path.startswith("//"):
        path = "/." + path

    return compose(scheme, authority, path, query, fragment)
