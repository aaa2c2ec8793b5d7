import pytest

from routekit.core import Headers, MethodNotAllowed, Request, Response, any as any_filter
from routekit.method import post
from routekit.reply_with import default_header, header, headers


def _hello():
    return any_filter().map(lambda: "hello")


def test_header_added_to_reply():
    route = _hello().with_(header("foo", "bar"))
    (resp,) = route.apply(Request())
    assert resp.headers["foo"] == "bar"
    assert resp.body == b"hello"
    assert resp.status == 200


def test_header_replaces_existing_value():
    inner = any_filter().map(lambda: Response(200, Headers({"foo": "baz"}), b""))
    (resp,) = inner.with_(header("foo", "bar")).apply(Request())
    assert resp.headers["foo"] == "bar"


def test_headers_sets_all():
    source = {"server": "wee/0", "foo": "bar"}
    route = _hello().with_(headers(source))
    (resp,) = route.apply(Request())
    assert resp.headers["server"] == "wee/0"
    assert resp.headers["foo"] == "bar"


def test_headers_copies_its_input():
    source = {"foo": "bar"}
    wrapper = headers(source)
    source["extra"] = "value"
    (resp,) = _hello().with_(wrapper).apply(Request())
    assert "extra" not in resp.headers


def test_default_header_keeps_existing():
    inner = any_filter().map(lambda: Response(200, Headers({"server": "custom"}), b""))
    (resp,) = inner.with_(default_header("server", "warp")).apply(Request())
    assert resp.headers["server"] == "custom"


def test_default_header_added_when_missing():
    (resp,) = _hello().with_(default_header("server", "warp")).apply(Request())
    assert resp.headers["server"] == "warp"


def test_rejection_passes_through_without_header():
    route = post().map(lambda: "hello").with_(header("foo", "bar"))
    with pytest.raises(MethodNotAllowed):
        route.apply(Request(method="GET"))


@pytest.mark.parametrize("name", ["", "bad name", "bad:name"])
def test_invalid_header_name(name):
    with pytest.raises(ValueError):
        header(name, "ok")


@pytest.mark.parametrize("value", ["line\nbreak", "nul\x00", "del\x7f"])
def test_invalid_header_value(value):
    with pytest.raises(ValueError):
        default_header("foo", value)


def test_name_is_case_insensitive():
    (resp,) = _hello().with_(header("X-Custom", "yes")).apply(Request())
    assert resp.headers["x-custom"] == "yes"