"""
HTTP message base class for http_message.

Message holds what requests and responses have in common: the protocol
version, the headers and the body stream. Instances are immutable; every
with_* method returns a modified copy.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from typing_extensions import Self

from .exceptions import InvalidArgumentError
from .headers import HeaderBag, HeaderValue
from .streams import StreamFactory, StreamInterface


@dataclass(frozen=True)
class Message:
    """
    Immutable HTTP message.

    The body is created lazily: a message built without a stream gets an
    empty one from its stream factory the first time ``body`` is read.
    """

    headers: HeaderBag = field(default_factory=HeaderBag)
    stream: Optional[StreamInterface] = None
    protocol_version: str = "1.1"
    stream_factory: Optional[StreamFactory] = field(default=None, repr=False, compare=False)

    # Messages are never hashable; each dataclass subclass repeats this.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        """Validate and normalize message data after initialization."""
        if not isinstance(self.headers, HeaderBag):
            object.__setattr__(self, "headers", HeaderBag(self.headers))

        if not isinstance(self.protocol_version, str):
            raise InvalidArgumentError("protocol version must be a string")

        if self.stream is not None and not isinstance(self.stream, StreamInterface):
            raise InvalidArgumentError("body must implement StreamInterface")

    def _replace(self, **changes: Any) -> Self:
        """Copy the message and override some fields, skipping __post_init__."""
        message = copy.copy(self)
        for name, value in changes.items():
            object.__setattr__(message, name, value)
        return message

    def with_protocol_version(self, version: str) -> Self:
        """Create a new message with a different protocol version."""
        if not isinstance(version, str):
            raise InvalidArgumentError("protocol version must be a string")
        return self._replace(protocol_version=version)

    def get_headers(self) -> Dict[str, List[str]]:
        return self.headers.all()

    def has_header(self, name: str) -> bool:
        return self.headers.has(name)

    def get_header(self, name: str) -> List[str]:
        return self.headers.get(name)

    def get_header_line(self, name: str) -> str:
        return self.headers.get_line(name)

    def with_header(self, name: str, value: HeaderValue) -> Self:
        """Create a new message where ``value`` replaces the header."""
        return self._replace(headers=self.headers.set(name, value))

    def with_added_header(self, name: str, value: HeaderValue) -> Self:
        """Create a new message with ``value`` appended to the header."""
        return self._replace(headers=self.headers.add(name, value))

    def without_header(self, name: str) -> Self:
        return self._replace(headers=self.headers.remove(name))

    @property
    def body(self) -> StreamInterface:
        """Get the body stream, creating an empty one if none was set."""
        if self.stream is None:
            factory = self.stream_factory or StreamFactory()
            object.__setattr__(self, "stream", factory.create_stream())
        return self.stream

    def with_body(self, body: StreamInterface) -> Self:
        """Create a new message with a different body stream."""
        if not isinstance(body, StreamInterface):
            raise InvalidArgumentError("body must implement StreamInterface")
        return self._replace(stream=body)
