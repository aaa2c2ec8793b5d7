import pytest

from routekit import header as h
from routekit.core import InvalidHeader, MissingHeader, Request


def req(**headers):
    return Request(headers={k.replace("_", "-"): v for k, v in headers.items()})


def test_header_parses_int():
    assert h.header("content-length", int).apply(req(content_length="100")) == (100,)


def test_header_default_is_string():
    assert h.header("foo").apply(req(foo="bar")) == ("bar",)


def test_header_missing_rejects():
    with pytest.raises(MissingHeader) as info:
        h.header("content-length", int).apply(req())
    assert info.value.name == "content-length"
    assert info.value.status == 400


def test_header_unparsable_rejects():
    with pytest.raises(InvalidHeader) as info:
        h.header("content-length", int).apply(req(content_length="abc"))
    assert info.value.name == "content-length"


def test_header_non_visible_ascii_rejects():
    with pytest.raises(InvalidHeader):
        h.header("foo").apply(req(foo="caf\u00e9"))


def test_optional_absent_and_present():
    f = h.optional("authorization")
    assert f.apply(req()) == (None,)
    assert f.apply(req(authorization="Bearer token")) == ("Bearer token",)


def test_optional_invalid_rejects():
    with pytest.raises(InvalidHeader):
        h.optional("x-count", int).apply(req(x_count="nope"))


def test_exact():
    f = h.exact("dnt", "1")
    assert f.apply(req(dnt="1")) == ()
    with pytest.raises(InvalidHeader):
        f.apply(req(dnt="0"))
    with pytest.raises(MissingHeader):
        f.apply(req())


def test_exact_is_case_sensitive():
    with pytest.raises(InvalidHeader):
        h.exact("connection", "keep-alive").apply(req(connection="Keep-Alive"))


def test_exact_ignore_case():
    f = h.exact_ignore_case("connection", "keep-alive")
    assert f.apply(req(connection="Keep-Alive")) == ()
    with pytest.raises(InvalidHeader):
        f.apply(req(connection="close"))


def test_value():
    assert h.value("x-token").apply(req(x_token="token")) == ("token",)
    with pytest.raises(MissingHeader):
        h.value("x-token").apply(req())


def test_headers_cloned_is_copy():
    request = req(foo="bar")
    (cloned,) = h.headers_cloned().apply(request)
    assert dict(cloned) == {"foo": "bar"}
    cloned["foo"] = "changed"
    assert request.headers["foo"] == "bar"