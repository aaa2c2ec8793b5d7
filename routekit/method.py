"""Filters on the HTTP method of a request."""

from __future__ import annotations

from .core import Filter, MethodNotAllowed, Request

__all__ = ["get", "post", "put", "delete", "head", "options", "patch", "method"]


def _method_is(expected: str) -> Filter:
    def run(request: Request) -> tuple:
        if request.method == expected:
            return ()
        raise MethodNotAllowed()

    return Filter(run)


def get() -> Filter:
    """Require the request method to be ``GET``."""
    return _method_is("GET")


def post() -> Filter:
    """Require the request method to be ``POST``."""
    return _method_is("POST")


def put() -> Filter:
    """Require the request method to be ``PUT``."""
    return _method_is("PUT")


def delete() -> Filter:
    """Require the request method to be ``DELETE``."""
    return _method_is("DELETE")


def head() -> Filter:
    """Require the request method to be ``HEAD``."""
    return _method_is("HEAD")


def options() -> Filter:
    """Require the request method to be ``OPTIONS``."""
    return _method_is("OPTIONS")


def patch() -> Filter:
    """Require the request method to be ``PATCH``."""
    return _method_is("PATCH")


def method() -> Filter:
    """Extract the request method; never rejects."""
    return Filter(lambda request: (request.method,))