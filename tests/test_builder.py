import ipaddress
import logging

import pytest

from nuri import BuildError, BuildErrorKind, Builder, ComponentKind, EStr, EString, HostKind, parse


def test_build():
    uri = (
        Builder()
        .scheme("foo")
        .userinfo("user")
        .host("example.com")
        .port(8042)
        .path("/over/there")
        .query("name=ferret")
        .fragment("nose")
        .build()
    )
    assert uri.as_str() == "foo://user@example.com:8042/over/there?name=ferret#nose"
    assert uri == parse(uri.as_str())
    assert uri.authority().host_kind() is HostKind.REG_NAME


def test_build_empty():
    assert Builder().build().as_str() == ""
    assert Builder().path("a/b").build().as_str() == "a/b"


def test_path_can_be_set_before_host():
    uri = Builder().path("/x").scheme("s").host("h").build()
    assert uri.as_str() == "s://h/x"


def test_encoded_path():
    path = EString(ComponentKind.PATH)
    path.encode("/files/")
    path.encode("a b/c", ComponentKind.PATH_SEGMENT)
    uri = Builder().scheme("file").host("").path(path).build()
    assert uri.as_str() == "file:///files/a%20b%2Fc"
    assert uri.path().segments()[-1].decode().as_str() == "a b/c"


def test_wrong_component_kind():
    with pytest.raises(TypeError):
        Builder().path(EStr.new("a?b", ComponentKind.QUERY))
    Builder().query(EStr.new("a/b", ComponentKind.PATH))


@pytest.mark.parametrize(
    "host, kind",
    [
        ("example.com", HostKind.REG_NAME),
        ("", HostKind.REG_NAME),
        ("10.0.0.1", HostKind.IPV4),
        ("[::1]", HostKind.IPV6),
        ("[v1.x]", HostKind.IPVFUTURE),
        (ipaddress.IPv4Address("192.0.2.1"), HostKind.IPV4),
        (ipaddress.IPv6Address("2001:db8::1"), HostKind.IPV6),
    ],
)
def test_host_kinds(host, kind):
    uri = Builder().scheme("s").host(host).build()
    assert uri.authority().host_kind() is kind
    assert parse(uri.as_str()).authority().host_kind() is kind


def test_ipv6_address_is_bracketed():
    uri = Builder().scheme("s").host(ipaddress.IPv6Address("2001:db8::1")).port(80).build()
    assert uri.as_str() == "s://[2001:db8::1]:80"


@pytest.mark.parametrize(
    "builder, kind, component",
    [
        (Builder().scheme("1x"), BuildErrorKind.INVALID_SCHEME, "scheme"),
        (Builder().scheme(""), BuildErrorKind.INVALID_SCHEME, "scheme"),
        (Builder().userinfo("u"), BuildErrorKind.MISSING_HOST, "userinfo"),
        (Builder().port("80"), BuildErrorKind.MISSING_HOST, "port"),
        (Builder().host("a b"), BuildErrorKind.INVALID_HOST, "host"),
        (Builder().host("[::1"), BuildErrorKind.INVALID_HOST, "host"),
        (Builder().host("[zz]"), BuildErrorKind.INVALID_HOST, "host"),
        (Builder().host("h").port("8x"), BuildErrorKind.INVALID_PORT, "port"),
        (Builder().host("h").userinfo("a@b"), BuildErrorKind.INVALID_COMPONENT, "userinfo"),
        (Builder().path("a b"), BuildErrorKind.INVALID_COMPONENT, "path"),
        (Builder().query("a#b"), BuildErrorKind.INVALID_COMPONENT, "query"),
        (Builder().fragment("%zz"), BuildErrorKind.INVALID_COMPONENT, "fragment"),
        (Builder().host("h").path("a"), BuildErrorKind.PATH_AUTHORITY_CONFLICT, "path"),
        (Builder().scheme("s").path("//x"), BuildErrorKind.PATH_STARTS_WITH_DOUBLE_SLASH, "path"),
        (Builder().path("a:b/c"), BuildErrorKind.COLON_IN_FIRST_SEGMENT, "path"),
    ],
)
def test_build_errors(builder, kind, component):
    with pytest.raises(BuildError) as excinfo:
        builder.build()
    assert excinfo.value.kind is kind
    assert excinfo.value.component == component


def test_colon_allowed_after_first_segment_or_with_scheme():
    assert Builder().path("a/b:c").build().as_str() == "a/b:c"
    assert Builder().scheme("s").path("a:b").build().as_str() == "s:a:b"


def test_port_out_of_range():
    with pytest.raises(BuildError) as excinfo:
        Builder().port(70000)
    assert excinfo.value.kind is BuildErrorKind.INVALID_PORT
    with pytest.raises(BuildError):
        Builder().port(-1)


def test_build_errors_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="nuri.builder"):
        with pytest.raises(BuildError):
            Builder().path("a:b").build()
    assert "first path segment" in caplog.text


@pytest.mark.parametrize(
    "text",
    ["foo://u@h:1/p?q#f", "urn:a:b", "//h", "", "?q", "s://[::1]/", "a/b"],
)
def test_from_uri_round_trip(text):
    uri = parse(text)
    assert uri.builder().build() == uri
    assert Builder.from_uri(uri).build() == uri


def test_from_uri_then_modify():
    uri = parse("http://a/b?q#f").builder().query(None).fragment("g").build()
    assert uri.as_str() == "http://a/b#g"
    uri = parse("http://u@a:1/b").builder().authority(None).build()
    assert uri.as_str() == "http:/b"
    uri = Builder().scheme("s").authority(parse("//u@h:2").authority()).build()
    assert uri.as_str() == "s://u@h:2"
