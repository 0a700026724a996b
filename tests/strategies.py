"""Hypothesis strategies generating valid URI-references."""

from hypothesis import strategies as st

_unreserved = st.sampled_from(list("abcXYZ019-._~"))
_pchar = st.one_of(_unreserved, st.sampled_from(list("!$&'()*+,;=:@") + ["%20", "%2f", "%C3%A9", "%2e"]))
_segment = st.lists(_pchar, max_size=4).map("".join)
_segment_nz = st.lists(_pchar, min_size=1, max_size=4).map("".join)
_path_abempty = st.lists(_segment, max_size=4).map(lambda segments: "".join("/" + s for s in segments))
_scheme = st.tuples(st.sampled_from(list("abzXY")), st.lists(st.sampled_from(list("a1+-.")), max_size=3)).map(
    lambda t: t[0] + "".join(t[1])
)
_host = st.one_of(
    st.lists(st.one_of(_unreserved, st.sampled_from(["%41", "%2e", "!", "="])), max_size=6).map("".join),
    st.sampled_from(["127.0.0.1", "[::1]", "[2001:DB8::a:1]", "[v1.x:Y]", "[::ffff:10.0.0.1]"]),
)
_port = st.one_of(st.none(), st.sampled_from(["", "80", "08080"]))
_userinfo = st.one_of(st.none(), st.lists(st.one_of(_unreserved, st.sampled_from([":", "%3a"])), max_size=5).map("".join))
_opaque = st.one_of(st.none(), st.lists(st.one_of(_pchar, st.sampled_from(["/", "?"])), max_size=6).map("".join))


@st.composite
def uri_references(draw):
    text: str = ""
    scheme = draw(st.one_of(st.none(), _scheme))
    if scheme is not None:
        text += f"{scheme}:"
    shape = draw(st.sampled_from(["authority", "absolute", "rootless", "empty"]))
    if shape == "authority":
        userinfo = draw(_userinfo)
        port = draw(_port)
        text += "//"
        if userinfo is not None:
            text += f"{userinfo}@"
        text += draw(_host)
        if port is not None:
            text += f":{port}"
        text += draw(_path_abempty)
    elif shape == "absolute":
        text += "/" + draw(_segment_nz) + draw(_path_abempty)
    elif shape == "rootless" and scheme is not None:
        text += draw(_segment_nz) + draw(_path_abempty)
    query = draw(_opaque)
    if query is not None:
        text += f"?{query}"
    fragment = draw(_opaque)
    if fragment is not None:
        text += f"#{fragment}"
    return text
