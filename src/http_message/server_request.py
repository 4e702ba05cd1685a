"""
Server-side HTTP request for http_message.

A ServerRequest is a Request as seen by the application: it also carries
the server environment, parsed query string and cookies, uploaded files,
a parsed body and free-form attributes.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from typing_extensions import Self

from . import environment
from .headers import HeaderBag
from .request import Request
from .streams import StreamFactory, StreamInterface
from .uri import Uri


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Take a read-only snapshot of a mapping."""
    return MappingProxyType(dict(mapping or {}))


def parse_query(query: str) -> Dict[str, Any]:
    """
    Parse a query string into query params.

    A repeated plain key keeps its last value. Keys ending in ``[]`` collect
    every value into a list under the name without the brackets, so
    ``a[]=1&a[]=2`` gives ``{"a": ["1", "2"]}``.
    """
    params: Dict[str, Any] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key.endswith("[]") and len(key) > 2:
            name = key[:-2]
            values = params.get(name)
            if not isinstance(values, list):
                values = params[name] = []
            values.append(value)
        else:
            params[key] = value
    return params


@dataclass(frozen=True)
class ServerRequest(Request):
    """
    Immutable server request representation.

    All parameter mappings are read-only snapshots taken when the request
    is built. When no query params are given they are parsed from the URI.
    """

    server_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Optional[Mapping[str, Any]] = None
    cookie_params: Mapping[str, str] = field(default_factory=dict)
    uploaded_files: Mapping[str, Any] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)
    parsed_body: Any = None

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__post_init__()
        query_params = self.query_params
        if not query_params:
            query_params = parse_query(self.uri.query)

        object.__setattr__(self, "server_params", _freeze(self.server_params))
        object.__setattr__(self, "query_params", _freeze(query_params))
        object.__setattr__(self, "cookie_params", _freeze(self.cookie_params))
        object.__setattr__(self, "uploaded_files", _freeze(self.uploaded_files))
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, Any],
        ambient_headers: Optional[Mapping[str, str]] = None,
        body: Optional[StreamInterface] = None,
        stream_factory: Optional[StreamFactory] = None,
    ) -> Self:
        """
        Build a server request from a CGI-style environment.

        Args:
            environ: Environment map, e.g. a WSGI environ
            ambient_headers: Headers the runtime already gathered, if any
            body: Body stream; defaults to ``wsgi.input`` when present
            stream_factory: Factory used for body streams

        Returns:
            New ServerRequest instance
        """
        snapshot = environment.from_environment(environ, ambient_headers)

        if body is None and environ.get("wsgi.input") is not None:
            factory = stream_factory or StreamFactory()
            body = factory.create_stream_from_resource(environ["wsgi.input"])

        return cls(
            headers=HeaderBag(snapshot.headers),
            stream=body,
            stream_factory=stream_factory,
            method=snapshot.method,
            uri=Uri.from_string(snapshot.uri),
            server_params=environ,
            cookie_params=snapshot.cookies,
        )

    def with_cookie_params(self, cookies: Mapping[str, str]) -> Self:
        return self._replace(cookie_params=_freeze(cookies))

    def with_query_params(self, query: Mapping[str, Any]) -> Self:
        return self._replace(query_params=_freeze(query))

    def with_uploaded_files(self, uploaded_files: Mapping[str, Any]) -> Self:
        return self._replace(uploaded_files=_freeze(uploaded_files))

    def with_parsed_body(self, data: Any) -> Self:
        return self._replace(parsed_body=data)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> Self:
        """Create a new request with one attribute set."""
        return self._replace(attributes=_freeze({**self.attributes, name: value}))

    def without_attribute(self, name: str) -> Self:
        """Create a new request without the attribute ``name``."""
        attributes = dict(self.attributes)
        attributes.pop(name, None)
        return self._replace(attributes=_freeze(attributes))
