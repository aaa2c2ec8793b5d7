import pytest

from routekit.core import InvalidHeader, NotFound, Request
from routekit.host import Authority, exact, optional


def test_optional_without_authority_is_none():
    assert optional().apply(Request(uri="/")) == (None,)


def test_optional_from_host_header():
    request = Request(uri="/", headers={"Host": "example.com"})
    assert optional().apply(request) == (Authority.parse("example.com"),)


def test_optional_from_uri():
    request = Request(uri="http://example.com/foo")
    (authority,) = optional().apply(request)
    assert authority.as_str() == "example.com"


def test_optional_matching_uri_and_header():
    request = Request(uri="http://example.com/foo", headers={"host": "EXAMPLE.com"})
    (authority,) = optional().apply(request)
    assert authority == Authority.parse("example.com")


def test_optional_mismatch_rejects():
    request = Request(uri="http://example.com/foo", headers={"host": "example.org"})
    with pytest.raises(InvalidHeader):
        optional().apply(request)


def test_optional_malformed_header_rejects():
    request = Request(uri="/", headers={"host": "not a host"})
    with pytest.raises(InvalidHeader) as info:
        optional().apply(request)
    assert info.value.name == "host"


def test_exact_matches():
    request = Request(uri="/", headers={"host": "foo.com"})
    assert exact("foo.com").apply(request) == ()


def test_exact_other_host_is_not_found():
    request = Request(uri="/", headers={"host": "bar.com"})
    with pytest.raises(NotFound):
        exact("foo.com").apply(request)


def test_exact_missing_host_is_not_found():
    with pytest.raises(NotFound):
        exact("foo.com").apply(Request(uri="/"))


def test_exact_with_or_picks_second():
    route = exact("foo.com").map(lambda: "foo").or_(exact("bar.com").map(lambda: "bar"))
    request = Request(uri="/", headers={"host": "bar.com"})
    assert route.apply(request) == ("bar",)


def test_exact_invalid_expected_raises():
    with pytest.raises(ValueError):
        exact("bad host")


def test_authority_case_insensitive_equality():
    assert Authority.parse("Example.COM") == Authority.parse("example.com")
    assert hash(Authority.parse("Example.COM")) == hash(Authority.parse("example.com"))


def test_authority_host_and_port():
    authority = Authority.parse("127.0.0.1:8080")
    assert authority.host() == "127.0.0.1"
    assert authority.port() == 8080
    assert str(authority) == "127.0.0.1:8080"


def test_authority_without_port():
    assert Authority.parse("example.com").port() is None


def test_authority_ipv6():
    authority = Authority.parse("[::1]:3000")
    assert authority.host() == "[::1]"
    assert authority.port() == 3000


@pytest.mark.parametrize("text", ["", "a:b:c", "host:abc", "a b", "host/path", ":80"])
def test_authority_parse_errors(text):
    with pytest.raises(ValueError):
        Authority.parse(text)