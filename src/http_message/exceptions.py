"""
Custom exceptions for http_message.

This module defines the exception hierarchy used throughout
the library. Every error is raised synchronously at the point of
construction or mutation; no object is left half-built.
"""

from typing import Optional


class HTTPMessageError(Exception):
    """Base exception for all http_message errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidArgumentError(HTTPMessageError):
    """Raised when a component is given a value of the wrong type."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Invalid argument: {message}", cause)


class InvalidSchemeError(InvalidArgumentError):
    """Raised when a URI scheme is not one of the known schemes."""
    
    def __init__(self, scheme: str) -> None:
        super().__init__(f'unknown scheme "{scheme}"')
        self.scheme = scheme


class InvalidPortError(InvalidArgumentError):
    """Raised when a port is not an integer in the range 1-65535."""
    
    def __init__(self, port: object) -> None:
        super().__init__(f"invalid port {port!r}")
        self.port = port


class InvalidMethodError(HTTPMessageError):
    """Raised when a request method is not a known HTTP method."""
    
    def __init__(self, method: object) -> None:
        super().__init__(f"Invalid HTTP method: {method!r}")
        self.method = method


class InvalidStatusCodeError(HTTPMessageError):
    """Raised when a response status code is outside 100-599."""
    
    def __init__(self, code: object) -> None:
        super().__init__(f"Invalid HTTP status code: {code!r}")
        self.code = code


class UriParseError(HTTPMessageError):
    """Raised when a URI string cannot be parsed."""
    
    def __init__(self, uri: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f'Unable to parse URI: "{uri}"', cause)
        self.uri = uri


class StreamError(HTTPMessageError):
    """Raised when there's an error with stream operations."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)


class UploadedFileError(HTTPMessageError):
    """Raised when an uploaded file cannot be accessed or moved."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Uploaded file error: {message}", cause)
