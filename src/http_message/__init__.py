"""
http_message - Immutable HTTP message objects

Requests, responses, server requests and URIs as validated immutable
values, with case-insensitive headers and request reconstruction from
CGI-style environments.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .headers import HeaderBag
from .uri import Uri
from .message import Message
from .request import Request
from .response import Response
from .server_request import ServerRequest
from .environment import EnvironmentSnapshot, from_environment
from .streams import Stream, StreamFactory, StreamInterface
from .uploaded_file import UploadedFile, UploadError
from .factories import (
    RequestFactory,
    ResponseFactory,
    ServerRequestFactory,
    UploadedFileFactory,
    UriFactory,
)
from .exceptions import (
    HTTPMessageError,
    InvalidArgumentError,
    InvalidMethodError,
    InvalidPortError,
    InvalidSchemeError,
    InvalidStatusCodeError,
    StreamError,
    UploadedFileError,
    UriParseError,
)

__all__ = [
    "HeaderBag",
    "Uri",
    "Message",
    "Request",
    "Response",
    "ServerRequest",
    "EnvironmentSnapshot",
    "from_environment",
    "Stream",
    "StreamFactory",
    "StreamInterface",
    "UploadedFile",
    "UploadError",
    "RequestFactory",
    "ResponseFactory",
    "ServerRequestFactory",
    "UploadedFileFactory",
    "UriFactory",
    "HTTPMessageError",
    "InvalidArgumentError",
    "InvalidMethodError",
    "InvalidPortError",
    "InvalidSchemeError",
    "InvalidStatusCodeError",
    "StreamError",
    "UploadedFileError",
    "UriParseError",
]
