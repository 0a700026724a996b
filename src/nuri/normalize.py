"""Syntax-based normalization, RFC 3986 section 6.2.2.

No scheme-based normalization is done: ports are kept as written, and
"http://a:80/" stays distinct from "http://a/".
"""

from nuri import abnf
from nuri.encoding import normalize_triplets
from nuri.resolve import remove_dot_segments
from nuri.uri import AuthorityParts, HostKind, UriRef, compose


def _remove_dot_segments_relative(path: str) -> str:
    """Dot-segment removal for a relative-path reference, which has nothing to be resolved against yet.

    Interior dot segments are collapsed as remove_dot_segments would, but ".." segments that
    climb above the start of the path are kept, so the reference still means the same thing
    once it is resolved. The result never looks absolute: "a/..//b" gives ".//b", and a path
    that collapses entirely gives "./".
    """
    segments: list[str] = path.split("/")
    last: int = len(segments) - 1
    output: list[str] = []
    for i, segment in enumerate(segments):
        if segment == "." or segment == "..":
            if segment == "..":
                if output and output[-1] != "..":
                    output.pop()
                else:
                    output.append("..")
            if i == last:
                # A trailing dot segment still names a directory.
                output.append("")
            continue
        output.append(segment)
    if not output or output == [""]:
        return "./" if path else ""
    if output[0] == "" and len(output) > 1:
        output.insert(0, ".")
    return "/".join(output)


def _normalize_path(path: str, has_scheme: bool, has_authority: bool) -> str:
    path = normalize_triplets(path)
    if has_authority and len(path) == 0:
        return "/"
    if has_scheme or has_authority or path.startswith("/"):
        path = remove_dot_segments(path)
    else:
        path = _remove_dot_segments_relative(path)

    if not has_authority and path.startswith("//"):
        path = "/." + path
    if not has_scheme and not has_authority and ":" in path.partition("/")[0]:
        # Would otherwise be read as a scheme.
        path = "./" + path
    return path


def _normalize_authority(authority: AuthorityParts) -> AuthorityParts:
    host: str = authority.host
    host_kind: HostKind = authority.host_kind
    if host_kind is not HostKind.IPV4:
        host = normalize_triplets(host, lowercase=True)
    # Decoding can turn a reg-name such as "127%2E0.0.1" into an IPv4 address.
    if host_kind is HostKind.REG_NAME and abnf.is_ipv4(host):
        host_kind = HostKind.IPV4
    return AuthorityParts(
        userinfo=normalize_triplets(authority.userinfo) if authority.userinfo is not None else None,
        host=host,
        host_kind=host_kind,
        port=authority.port,
    )


def normalize(uri: UriRef) -> UriRef:
    """Returns the normal form of uri:

    - scheme and host are lowercased;
    - the hex digits of every percent-encoded octet are uppercased;
    - octets that encode unreserved characters are decoded;
    - dot segments are removed from the path;
    - an empty path with an authority becomes "/".

    normalize(normalize(u)) == normalize(u) for every u.
    """
    scheme, authority, path, query, fragment = uri._parts()
    return compose(
        scheme=scheme.lower() if scheme is not None else None,
        authority=_normalize_authority(authority) if authority is not None else None,
        path=_normalize_path(path, scheme is not None, authority is not None),
        query=normalize_triplets(query) if query is not None else None,
        fragment=normalize_triplets(fragment) if fragment is not None else None,
    )
