"""
HTTP request for http_message.

A Request is a Message with a method, a URI and an optional
request-target override. The Host header follows the URI unless the
caller supplied one or asks for it to be preserved.
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional, Union

from typing_extensions import Self

from .exceptions import InvalidArgumentError, InvalidMethodError
from .headers import HeaderBag, HeaderInput
from .message import Message
from .streams import StreamFactory, StreamInterface
from .uri import Uri


HTTP_METHODS: FrozenSet[str] = frozenset({
    "CONNECT",
    "DELETE",
    "GET",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
    "TRACE",
})


def filter_method(method: Any) -> str:
    """Upper-case a method and check it is a known HTTP method."""
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        raise InvalidMethodError(method)
    return method.upper()


def host_from_uri(headers: HeaderBag, uri: Uri) -> HeaderBag:
    """
    Put a Host header derived from ``uri`` in front of ``headers``.

    An empty host leaves the headers untouched, including any Host
    header that is already there.
    """
    host = uri.host
    if not host:
        return headers

    port = uri.port
    if port is not None:
        host = f"{host}:{port}"

    name = headers.canonical_name("host") or "Host"
    return headers.set(name, host, first=True)


@dataclass(frozen=True)
class Request(Message):
    """
    Immutable HTTP request representation.

    Once created, the request cannot be modified - any changes
    must create a new Request instance.
    """

    method: str = "GET"
    uri: Uri = field(default_factory=Uri)
    target: Optional[str] = None

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "method", filter_method(self.method))

        if isinstance(self.uri, str):
            object.__setattr__(self, "uri", Uri.from_string(self.uri))
        if not isinstance(self.uri, Uri):
            raise InvalidArgumentError("uri must be a Uri or a string")

        if self.target is not None and not isinstance(self.target, str):
            raise InvalidArgumentError("request target must be a string")

        if not self.headers.has("host"):
            object.__setattr__(self, "headers", host_from_uri(self.headers, self.uri))

    @classmethod
    def create(
        cls,
        method: str,
        uri: Union[str, Uri],
        body: Optional[StreamInterface] = None,
        headers: Optional[HeaderInput] = None,
        protocol_version: str = "1.1",
        stream_factory: Optional[StreamFactory] = None,
        **fields: Any,
    ) -> Self:
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, etc.), any case
            uri: URI string or Uri
            body: Optional body stream
            headers: Optional mapping of header name to value(s)
            protocol_version: HTTP protocol version
            stream_factory: Factory used to create an empty body lazily
            **fields: Extra fields of subclasses

        Returns:
            New Request instance
        """
        return cls(
            headers=HeaderBag(headers),
            stream=body,
            protocol_version=protocol_version,
            stream_factory=stream_factory,
            method=method,
            uri=uri,
            **fields,
        )

    @property
    def request_target(self) -> str:
        """The explicit request target, else the URI's path and query."""
        if self.target is not None:
            return self.target

        target = self.uri.path
        if self.uri.query:
            target += f"?{self.uri.query}"
        return target

    def with_request_target(self, target: str) -> Self:
        if not isinstance(target, str):
            raise InvalidArgumentError("request target must be a string")
        return self._replace(target=target)

    def with_method(self, method: str) -> Self:
        """Create a new request with a different method."""
        return self._replace(method=filter_method(method))

    def with_uri(self, uri: Uri, preserve_host: bool = False) -> Self:
        """
        Create a new request with a different URI.

        Args:
            uri: The new URI
            preserve_host: Keep the current Host header as it is

        Returns:
            New Request instance
        """
        if not isinstance(uri, Uri):
            raise InvalidArgumentError("uri must be a Uri")

        if preserve_host:
            return self._replace(uri=uri)
        return self._replace(uri=uri, headers=host_from_uri(self.headers, uri))

    @property
    def scheme(self) -> str:
        """Get the URI scheme."""
        return self.uri.scheme

    @property
    def host(self) -> str:
        """Get the URI host."""
        return self.uri.host

    @property
    def port(self) -> Optional[int]:
        """Get the URI port."""
        return self.uri.port

    @property
    def path(self) -> str:
        """Get the URI path."""
        return self.uri.path
