"""
Body streams for http_message.

This module provides the stream abstraction used for message bodies and
uploaded files. A Stream wraps a binary Python file object; messages only
hold a reference to it and never read or write it themselves.
"""

import io
import logging
import os
from abc import ABC, abstractmethod
from typing import (
    IO,
    Any,
    AsyncIterator,
    Dict,
    Iterator,
    List,
    Optional,
    Union,
)

from .exceptions import StreamError

logger = logging.getLogger(__name__)


class StreamInterface(ABC):
    """
    Base interface for all body streams.

    All streams must implement this interface to ensure
    consistent behavior across the library.
    """

    @property
    @abstractmethod
    def size(self) -> Optional[int]:
        """Size of the stream in bytes, or None if unknown."""
        pass

    @property
    @abstractmethod
    def readable(self) -> bool:
        pass

    @property
    @abstractmethod
    def writable(self) -> bool:
        pass

    @property
    @abstractmethod
    def seekable(self) -> bool:
        pass

    @abstractmethod
    def tell(self) -> int:
        """Current position of the read/write pointer."""
        pass

    @abstractmethod
    def eof(self) -> bool:
        """Whether the end of the stream has been reached."""
        pass

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the pointer and return the new position."""
        pass

    @abstractmethod
    def read(self, length: int) -> bytes:
        """Read up to ``length`` bytes."""
        pass

    @abstractmethod
    def write(self, data: Union[bytes, str]) -> int:
        """Write data and return the number of bytes written."""
        pass

    @abstractmethod
    def get_contents(self) -> bytes:
        """Read the remaining contents of the stream."""
        pass

    @abstractmethod
    def get_metadata(self, key: Optional[str] = None) -> Any:
        """Stream metadata, or a single metadata entry."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the stream and the underlying resource."""
        pass

    def rewind(self) -> None:
        """Seek to the beginning of the stream."""
        self.seek(0)


class Stream(StreamInterface):
    """
    Stream over a binary file-like resource.

    The resource can be anything with the io.IOBase interface: an open
    file, an io.BytesIO, a spooled temporary file or a WSGI input stream.
    """

    DEFAULT_CHUNK_SIZE = 8192

    def __init__(self, resource: IO[bytes], chunk_size: Optional[int] = None) -> None:
        """
        Initialize Stream.

        Args:
            resource: Binary file-like object to wrap
            chunk_size: Size of the chunks produced when iterating
        """
        if resource is None or not hasattr(resource, "read") and not hasattr(resource, "write"):
            raise StreamError("resource must be a file-like object")

        self._resource: Optional[IO[bytes]] = resource
        self._chunk_size = chunk_size or self.DEFAULT_CHUNK_SIZE
        self._readable = self._probe(resource, "readable", hasattr(resource, "read"))
        self._writable = self._probe(resource, "writable", hasattr(resource, "write"))
        self._seekable = self._probe(resource, "seekable", False)
        self._eof = False

    @staticmethod
    def _probe(resource: Any, method: str, fallback: bool) -> bool:
        probe = getattr(resource, method, None)
        if probe is None:
            return fallback
        try:
            return bool(probe())
        except (OSError, ValueError):
            return False

    def _require_resource(self) -> IO[bytes]:
        if self._resource is None:
            raise StreamError("Stream is detached")
        return self._resource

    @property
    def size(self) -> Optional[int]:
        if self._resource is None:
            return None

        fileno = getattr(self._resource, "fileno", None)
        if fileno is not None:
            try:
                return os.fstat(fileno()).st_size
            except (OSError, ValueError):
                pass

        if self._seekable:
            position = self._resource.tell()
            size = self._resource.seek(0, io.SEEK_END)
            self._resource.seek(position)
            return size

        return None

    @property
    def readable(self) -> bool:
        return self._readable

    @property
    def writable(self) -> bool:
        return self._writable

    @property
    def seekable(self) -> bool:
        return self._seekable

    @property
    def closed(self) -> bool:
        return self._resource is None or bool(getattr(self._resource, "closed", False))

    def tell(self) -> int:
        if not self._readable and not self._writable:
            raise StreamError("Unable to get pointer position")
        try:
            return self._require_resource().tell()
        except (OSError, ValueError) as e:
            raise StreamError("Unable to get pointer position", cause=e) from e

    def eof(self) -> bool:
        return self._resource is None or self._eof

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if not self._seekable:
            raise StreamError("Resource is not seekable")
        try:
            position = self._require_resource().seek(offset, whence)
        except (OSError, ValueError) as e:
            raise StreamError(f"Unable to seek to {offset}", cause=e) from e
        self._eof = False
        return position

    def read(self, length: int) -> bytes:
        if not self._readable:
            raise StreamError("Resource is not readable")
        if length < 0:
            raise StreamError("Length must be greater than or equal to 0")
        if length == 0:
            return b""

        try:
            data = self._require_resource().read(length)
        except (OSError, ValueError) as e:
            raise StreamError("Unable to read from resource", cause=e) from e

        if len(data) < length:
            self._eof = True
        return data

    def write(self, data: Union[bytes, str]) -> int:
        if not self._writable:
            raise StreamError("Resource is not writable")
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            return self._require_resource().write(data)
        except (OSError, ValueError) as e:
            raise StreamError("Unable to write to resource", cause=e) from e

    def get_contents(self) -> bytes:
        if not self._readable:
            raise StreamError("Resource is not readable")
        try:
            data = self._require_resource().read()
        except (OSError, ValueError) as e:
            raise StreamError("Unable to read resource content", cause=e) from e
        self._eof = True
        return data

    def get_metadata(self, key: Optional[str] = None) -> Any:
        """
        Get stream metadata.

        Args:
            key: Optional metadata entry to return

        Returns:
            Metadata dict, or the entry for ``key`` (None if missing)
        """
        if self._resource is None:
            return None if key else {}

        name = getattr(self._resource, "name", None)
        metadata: Dict[str, Any] = {
            "mode": getattr(self._resource, "mode", "rb+"),
            "seekable": self._seekable,
            "uri": name if isinstance(name, str) else None,
            "stream_type": "file" if isinstance(name, str) else "memory",
        }

        if key is None:
            return metadata
        return metadata.get(key)

    def close(self) -> None:
        resource = self.detach()
        if resource is None:
            return
        try:
            resource.close()
        except OSError as e:
            raise StreamError("Could not close resource", cause=e) from e

    def detach(self) -> Optional[IO[bytes]]:
        """
        Separate the underlying resource from the stream.

        The stream is unusable afterwards.
        """
        resource = self._resource
        self._resource = None
        self._readable = False
        self._writable = False
        self._seekable = False
        return resource

    def __bytes__(self) -> bytes:
        """Read the whole stream from the beginning; empty on failure."""
        try:
            self.rewind()
            return self.get_contents()
        except StreamError as e:
            logger.debug(f"Could not render stream contents: {e}")
            return b""

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over the remaining contents in chunks."""
        while not self.eof():
            chunk = self.read(self._chunk_size)
            if chunk:
                yield chunk

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iter_async()

    async def _iter_async(self) -> AsyncIterator[bytes]:
        for chunk in self:
            yield chunk

    async def aread(self) -> bytes:
        """Read the remaining stream and return it as bytes."""
        chunks = []
        async for chunk in self:
            chunks.append(chunk)
        return b"".join(chunks)

    def __repr__(self) -> str:
        return f"Stream(size={self.size!r}, closed={self.closed!r})"


class StreamFactory:
    """Creates Stream instances for message bodies."""

    def __init__(self, chunk_size: Optional[int] = None) -> None:
        self._chunk_size = chunk_size

    def create_stream(self, content: Union[bytes, str] = b"") -> Stream:
        """
        Create a new in-memory stream holding ``content``.

        The stream is rewound so it can be read right away.
        """
        stream = Stream(io.BytesIO(), chunk_size=self._chunk_size)
        if content:
            stream.write(content)
            stream.rewind()
        return stream

    def create_stream_from_file(self, filename: Union[str, "os.PathLike[str]"], mode: str = "rb") -> Stream:
        """Create a stream from an existing file."""
        if "b" not in mode:
            mode += "b"
        try:
            resource = open(filename, mode)
        except OSError as e:
            raise StreamError(f"Unable to open {filename}", cause=e) from e
        return Stream(resource, chunk_size=self._chunk_size)

    def create_stream_from_resource(self, resource: IO[bytes]) -> Stream:
        """Create a stream from an already open file-like object."""
        return Stream(resource, chunk_size=self._chunk_size)


# Utility functions for working with streams
async def read_stream_to_bytes(stream: Stream) -> bytes:
    """
    Read entire stream and return as bytes.

    Args:
        stream: Stream to read

    Returns:
        All remaining bytes from the stream concatenated
    """
    return await stream.aread()


def stream_to_list(stream: Stream) -> List[bytes]:
    """
    Convert stream to list of chunks.

    Args:
        stream: Stream to read

    Returns:
        List of byte chunks
    """
    return list(stream)
