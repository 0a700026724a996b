import dataclasses
import ipaddress

import pytest

from nuri import ComponentKind, DecodeError, EStr, HostKind, UriRef, parse


def test_accessors():
    uri = parse("foo://user:pw@example.com:8042/over/there?name=ferret#nose")
    assert uri.scheme() == "foo"
    authority = uri.authority()
    assert authority == "user:pw@example.com:8042"
    assert authority.userinfo() == "user:pw"
    assert authority.userinfo().kind is ComponentKind.USERINFO
    assert authority.host() == "example.com"
    assert authority.port() == "8042"
    assert authority.port_to_int() == 8042
    assert uri.path() == "/over/there"
    assert uri.path().kind is ComponentKind.PATH
    assert uri.query() == "name=ferret"
    assert uri.query().kind is ComponentKind.QUERY
    assert uri.fragment() == "nose"
    assert uri.fragment().kind is ComponentKind.FRAGMENT
    assert uri.has_scheme() and uri.has_authority() and uri.has_query() and uri.has_fragment()
    assert not uri.is_absolute_uri()
    assert uri.strip_fragment().is_absolute_uri()


def test_absent_components():
    uri = parse("a/b")
    assert uri.scheme() is None
    assert uri.authority() is None
    assert uri.query() is None
    assert uri.fragment() is None
    assert not (uri.has_scheme() or uri.has_authority() or uri.has_query() or uri.has_fragment())


def test_scheme_compares_case_insensitively():
    scheme = parse("HtTp://h/").scheme()
    assert scheme.as_str() == "HtTp"
    assert scheme == "http"
    assert scheme == parse("HTTP:x").scheme()
    assert hash(scheme) == hash(parse("http:x").scheme())
    assert scheme != "https"


@pytest.mark.parametrize(
    "text, port, expected",
    [
        ("http://h", None, None),
        ("http://h:", "", None),
        ("http://h:0", "0", 0),
        ("http://h:00080", "00080", 80),
        ("http://h:65535", "65535", 65535),
    ],
)
def test_port(text, port, expected):
    authority = parse(text).authority()
    assert authority.port() == port
    assert authority.port_to_int() == expected


def test_port_out_of_range():
    authority = parse("http://h:65536").authority()
    assert authority.port() == "65536"
    with pytest.raises(ValueError):
        authority.port_to_int()


def test_host_parsed():
    host = parse("http://192.0.2.1/").authority().host_parsed()
    assert host.kind is HostKind.IPV4
    assert host.address == ipaddress.IPv4Address("192.0.2.1")
    assert host.reg_name is None

    host = parse("http://[2001:db8::1]:80/").authority().host_parsed()
    assert host.kind is HostKind.IPV6
    assert host.address == ipaddress.IPv6Address("2001:db8::1")
    assert host.as_str() == "[2001:db8::1]"

    host = parse("http://[v1F.a:b!]/").authority().host_parsed()
    assert host.kind is HostKind.IPVFUTURE
    assert host.ipvfuture == ("1F", "a:b!")
    assert host.address is None

    host = parse("http://ex%41mple.com/").authority().host_parsed()
    assert host.kind is HostKind.REG_NAME
    assert host.reg_name == "ex%41mple.com"
    assert host.reg_name.decode().as_str() == "exAmple.com"
    assert host.ipvfuture is None


def test_equality_is_textual():
    assert parse("http://a/b") == parse("http://a/b")
    assert parse("http://a/b") != parse("HTTP://a/b")
    assert len({parse("http://a/b"), parse("http://a/b")}) == 1
    assert repr(parse("a")) == "UriRef('a')"
    assert str(parse("a?b")) == "a?b"


def test_immutable():
    uri = parse("http://a/b")
    with pytest.raises(dataclasses.FrozenInstanceError):
        uri._source = "x"


def test_classmethod_parse():
    assert UriRef.parse("http://a/") == parse("http://a/")


def test_with_fragment():
    uri = parse("http://a/b?q#old")
    assert uri.with_fragment("new").as_str() == "http://a/b?q#new"
    assert uri.with_fragment(None).as_str() == "http://a/b?q"
    assert uri.with_fragment("").as_str() == "http://a/b?q#"
    assert uri.with_fragment(EStr.new("a/b", ComponentKind.PATH)).fragment() == "a/b"
    assert parse("x").with_fragment("f").fragment() == "f"
    with pytest.raises(DecodeError):
        uri.with_fragment("a b")


def test_with_fragment_keeps_components():
    uri = parse("s://u@[::1]:1/p?q").with_fragment("f")
    assert uri.authority().host_kind() is HostKind.IPV6
    assert uri.authority().userinfo() == "u"
    assert uri.authority().port() == "1"
    assert uri.query() == "q"
    assert parse(uri.as_str()) == uri


def test_strip_fragment():
    uri = parse("http://a/b#c")
    assert uri.strip_fragment() == parse("http://a/b")
    plain = parse("http://a/b")
    assert plain.strip_fragment() is plain
