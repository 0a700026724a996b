import pytest

from hypothesis import given

from nuri import HostKind, normalize, parse

from tests.strategies import uri_references


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ""),
        ("HTTP://www.EXAMPLE.com/", "http://www.example.com/"),
        ("http://example.com", "http://example.com/"),
        ("foo://", "foo:///"),
        ("http://a/%7Euser", "http://a/~user"),
        ("http://a/%7e%2f%3a", "http://a/~%2F%3A"),
        ("http://a/b/../c/./d", "http://a/c/d"),
        ("http://a/b/c/%2E%2E/d", "http://a/b/d"),
        ("http://%41.com/", "http://a.com/"),
        ("http://User%3a@Host/", "http://User%3A@host/"),
        ("http://a:80/", "http://a:80/"),
        ("http://a:/", "http://a:/"),
        ("http://[::FFFF:129.144.52.38]/", "http://[::ffff:129.144.52.38]/"),
        ("http://[V1.AB]/", "http://[v1.ab]/"),
        ("http://a/?q=%5c&r=%7E#%7e%5B", "http://a/?q=%5C&r=~#~%5B"),
        ("foo:a/./b/../c", "foo:a/c"),
        ("mailto:John.Doe@Example.com", "mailto:John.Doe@Example.com"),
        ("a:/x/..//y", "a:/.//y"),
        ("/a/../../b", "/b"),
        ("/a/..//b", "/.//b"),
        ("../a/./b", "../a/b"),
        ("a/../../b", "../b"),
        ("a/..", "./"),
        (".", "./"),
        ("..", "../"),
        ("./a:b", "./a:b"),
        ("%2E%2E/a", "../a"),
        ("a/..//b", ".//b"),
        ("?q=%5c", "?q=%5C"),
        ("#%7E", "#~"),
    ],
)
def test_normalize(text, expected):
    assert normalize(parse(text)).as_str() == expected


def test_normalized_value_is_consistent_with_parse():
    uri = normalize(parse("http://127%2E0.0.1/a/../b"))
    assert uri.as_str() == "http://127.0.0.1/b"
    assert uri.authority().host_kind() is HostKind.IPV4
    assert parse(uri.as_str()) == uri
    assert parse(uri.as_str()).authority().host_kind() is uri.authority().host_kind()


def test_normalize_does_not_touch_input():
    uri = parse("HTTP://A/./b")
    normalize(uri)
    assert uri.as_str() == "HTTP://A/./b"


def test_method_spelling():
    assert parse("HTTP://A").normalize() == parse("http://a/")


@pytest.mark.parametrize(
    "text",
    ["a/..//b", "./a:b", "a:/x/..//y", "..", "a/..", "/.//", "http://a/b/../../..", "HTTP://%61%62@[::A]:/%2e"],
)
def test_normalize_is_idempotent(text):
    once = normalize(parse(text))
    assert normalize(once) == once
    # The normal form is itself a valid URI-reference with the same structure.
    reparsed = parse(once.as_str())
    assert reparsed.has_scheme() == once.has_scheme()
    assert reparsed.has_authority() == once.has_authority()
    assert reparsed.path() == once.path()


@given(uri_references())
def test_normalize_is_idempotent_on_generated_references(text):
    once = normalize(parse(text))
    assert normalize(once) == once
    assert parse(once.as_str()) == once
