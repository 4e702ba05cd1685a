"""
Object factories for http_message.

The factories wire URIs, streams and uploaded files into messages so
hosting code only deals with strings, codes and environment maps.
"""

import logging
from typing import IO, Any, Mapping, Optional, Union

from .exceptions import InvalidArgumentError
from .request import Request
from .response import Response
from .server_request import ServerRequest
from .streams import StreamFactory
from .uploaded_file import UploadedFile, UploadError
from .uri import Uri

logger = logging.getLogger(__name__)


class UriFactory:
    """Creates Uri instances from strings."""

    def create_uri(self, uri: str = "") -> Uri:
        return Uri.from_string(uri)


class RequestFactory:
    """Creates client requests with an empty body."""

    def __init__(
        self,
        uri_factory: Optional[UriFactory] = None,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self._uri_factory = uri_factory or UriFactory()
        self._stream_factory = stream_factory or StreamFactory()

    def create_request(self, method: str, uri: Union[str, Uri]) -> Request:
        if not isinstance(uri, Uri):
            uri = self._uri_factory.create_uri(uri)
        return Request.create(
            method,
            uri,
            body=self._stream_factory.create_stream(),
            stream_factory=self._stream_factory,
        )


class ResponseFactory:
    """Creates responses whose body is created on first access."""

    def __init__(self, stream_factory: Optional[StreamFactory] = None) -> None:
        self._stream_factory = stream_factory or StreamFactory()

    def create_response(self, code: int = 200, reason: str = "") -> Response:
        return Response.create(
            status_code=code,
            reason=reason,
            stream_factory=self._stream_factory,
        )


class UploadedFileFactory:
    """Creates UploadedFile instances from contents or open files."""

    def __init__(self, stream_factory: Optional[StreamFactory] = None) -> None:
        self._stream_factory = stream_factory or StreamFactory()

    def create_uploaded_file(
        self,
        file: Union[bytes, str, IO[bytes]],
        size: Optional[int] = None,
        error: int = UploadError.OK,
        client_filename: Optional[str] = None,
        client_media_type: Optional[str] = None,
    ) -> UploadedFile:
        """
        Create an uploaded file.

        Args:
            file: File contents, or an open binary file object
            size: Size in bytes; taken from the stream when not given
            error: One of the UploadError codes
            client_filename: File name sent by the client
            client_media_type: Media type sent by the client

        Returns:
            New UploadedFile instance

        Raises:
            InvalidArgumentError: If the file cannot be read
        """
        if isinstance(file, (bytes, str)):
            stream = self._stream_factory.create_stream(file)
        elif hasattr(file, "read"):
            stream = self._stream_factory.create_stream_from_resource(file)
        else:
            raise InvalidArgumentError(f"cannot create an uploaded file from {type(file).__name__}")

        if not stream.readable:
            raise InvalidArgumentError("Can not read from file resource")

        if not size:
            size = stream.size

        return UploadedFile(stream, error, size, client_filename, client_media_type)


class ServerRequestFactory:
    """Creates server requests, directly or from an environment map."""

    def __init__(
        self,
        uri_factory: Optional[UriFactory] = None,
        stream_factory: Optional[StreamFactory] = None,
        uploaded_file_factory: Optional[UploadedFileFactory] = None,
    ) -> None:
        self._uri_factory = uri_factory or UriFactory()
        self._stream_factory = stream_factory or StreamFactory()
        self._uploaded_file_factory = uploaded_file_factory or UploadedFileFactory(
            self._stream_factory
        )

    @property
    def uploaded_file_factory(self) -> UploadedFileFactory:
        return self._uploaded_file_factory

    def create_server_request(self, method: str, uri: Union[str, Uri]) -> ServerRequest:
        if not isinstance(uri, Uri):
            uri = self._uri_factory.create_uri(uri)
        return ServerRequest.create(
            method,
            uri,
            body=self._stream_factory.create_stream(),
            stream_factory=self._stream_factory,
        )

    def create_server_request_from_environment(
        self,
        environ: Mapping[str, Any],
        ambient_headers: Optional[Mapping[str, str]] = None,
    ) -> ServerRequest:
        """
        Create a server request from a CGI-style environment.

        The body wraps ``wsgi.input`` when the environment has one and is
        an empty stream otherwise.
        """
        body = None
        if environ.get("wsgi.input") is None:
            body = self._stream_factory.create_stream()

        request = ServerRequest.from_environment(
            environ,
            ambient_headers=ambient_headers,
            body=body,
            stream_factory=self._stream_factory,
        )
        logger.debug(f"Created server request {request.method} {request.request_target}")
        return request
