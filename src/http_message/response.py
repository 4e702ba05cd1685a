"""
HTTP response for http_message.

A Response is a Message with a status code and a reason phrase. When no
phrase is given the standard one for the status code is used.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from typing_extensions import Self

from .exceptions import InvalidArgumentError, InvalidStatusCodeError
from .headers import HeaderBag, HeaderInput
from .message import Message
from .streams import StreamFactory, StreamInterface


# https://www.iana.org/assignments/http-status-codes/http-status-codes.xhtml
STATUS_PHRASES: Dict[int, str] = {
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    103: "Early Hints",

    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",

    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    306: "(Unused)",
    307: "Temporary Redirect",
    308: "Permanent Redirect",

    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Payload Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",

    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}


def filter_status_code(code: Any) -> int:
    if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code <= 599:
        raise InvalidStatusCodeError(code)
    return code


@dataclass(frozen=True)
class Response(Message):
    """
    Immutable HTTP response representation.

    ``reason`` holds the phrase exactly as it was set; ``reason_phrase``
    falls back to the standard phrase when it is empty.
    """

    status_code: int = 200
    reason: str = ""

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__post_init__()
        filter_status_code(self.status_code)
        if not isinstance(self.reason, str):
            raise InvalidArgumentError("reason phrase must be a string")

    @classmethod
    def create(
        cls,
        status_code: int = 200,
        reason: str = "",
        body: Optional[StreamInterface] = None,
        headers: Optional[HeaderInput] = None,
        protocol_version: str = "1.1",
        stream_factory: Optional[StreamFactory] = None,
    ) -> Self:
        """
        Create a Response with proper validation.

        Args:
            status_code: HTTP status code
            reason: Optional reason phrase
            body: Optional body stream
            headers: Optional mapping of header name to value(s)
            protocol_version: HTTP protocol version
            stream_factory: Factory used to create an empty body lazily

        Returns:
            New Response instance
        """
        return cls(
            headers=HeaderBag(headers),
            stream=body,
            protocol_version=protocol_version,
            stream_factory=stream_factory,
            status_code=status_code,
            reason=reason,
        )

    @property
    def reason_phrase(self) -> str:
        return self.reason or STATUS_PHRASES.get(self.status_code, "")

    def with_status(self, code: int, reason: str = "") -> Self:
        """
        Create a new response with a different status code.

        Args:
            code: Status code between 100 and 599
            reason: Reason phrase; the standard phrase is used when empty

        Returns:
            New Response instance
        """
        code = filter_status_code(code)
        if not isinstance(reason, str):
            raise InvalidArgumentError("reason phrase must be a string")
        if not reason:
            reason = STATUS_PHRASES.get(code, "")
        return self._replace(status_code=code, reason=reason)
