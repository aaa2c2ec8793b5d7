# routekit

Composable request filters for describing HTTP endpoints.

A `Filter` looks at a `Request` and does one of two things. It extracts a tuple
of values from the request, or it raises a `Rejection` such as `NotFound`,
`MethodNotAllowed`, `MissingHeader`, `InvalidHeader` or `InvalidQuery`. Each
rejection has a `status` that gives its HTTP status code.

Filters combine with these methods:

- `and_` (or `&`) runs two filters in turn and joins what they extract.
- `or_` (or `|`) tries a second filter when the first one rejects. When both
  reject, it raises the more specific rejection.
- `map` turns the extracted values into one new value. `and_then` does the
  same, but its function may raise a `Rejection`.
- `with_` wraps a filter with an object that has a `wrap(filter)` method.

`Filter.apply(request)` runs a filter and returns the extracted tuple.

## Modules

- `routekit.core`: `Request`, `Response`, `Headers` (case-insensitive),
  `Filter`, the rejection classes, `any()` and `into_response()`.
  `into_response()` turns a reply into a `Response`. The reply may be a
  `Response`, text, bytes, or an object that has `into_response()`.
- `routekit.method`: `get()`, `post()`, `put()`, `delete()`, `head()`,
  `options()` and `patch()`, which reject any other method with
  `MethodNotAllowed`. `method()` extracts the method and never rejects.
- `routekit.path`: `path(segment)`, `param(parse)`, `end()`, `tail()`,
  `peek()`, `full()`, and `route(*args)`, which chains several segments in one
  call.
- `routekit.header`: `header(name, parse)`, `optional(name, parse)`,
  `exact(name, value)`, `exact_ignore_case(name, value)`, `value(name)` and
  `headers_cloned()`.
- `routekit.host`: `Authority`, plus `exact(expected)` and `optional()`. These
  read the authority from the request URI or from the `Host` header, and
  reject when the two disagree.
- `routekit.reply_with`: the wrappers `header(name, value)`,
  `headers(mapping)` and `default_header(name, value)`. They add headers to a
  successful reply.
- `routekit.ws`: `ws()`, `Ws`, `WebSocketConfig`, `Message`, `MessageKind`
  and `accept_key()`. These handle the websocket handshake and its messages.

## Example

```python
from routekit import header, method, path
from routekit.core import Request

hello = (
    path.path("hello")
    .and_(path.param(str))
    .and_(method.get())
    .and_(header.header("user-agent", str))
    .map(lambda name, agent: f"Hello {name}, whose agent is {agent}")
)

request = Request("GET", "/hello/sean", {"User-Agent": "curl/8.0"})
hello.apply(request)  # ('Hello sean, whose agent is curl/8.0',)
```

In `route(*args)`, a string matches a segment exactly and a callable parses a
parameter. By default the chain must match the whole path. Put `...` last to
match only a prefix.

```python
from routekit.core import Request
from routekit.path import route

sum_route = route("sum", int, int).map(lambda a, b: str(a + b))
sum_route.apply(Request(uri="/sum/1/2"))  # ('3',)

math = route("math", ...)
```

Adding a header to every reply:

```python
from routekit import reply_with
from routekit.core import Request, any

hi = any().map(lambda: "hi").with_(reply_with.header("server", "routekit"))
(response,) = hi.apply(Request())
response.headers["server"]  # 'routekit'
```

## What this package does not do

The package has no HTTP server and no network code. It does not listen on a
socket or parse HTTP from the wire. You build the `Request` objects yourself
and send the resulting `Response` yourself.

`Ws.on_upgrade` builds the `101 Switching Protocols` response. It hands the
socket to your function only when the server placed an async upgrade callable
in `request.extensions["on_upgrade"]`. The package has no websocket framing of
its own.

It has no filters for query strings, request bodies, static files, cookies or
access logging.

## Running the tests

```
pip install -e .[test]
pytest
```