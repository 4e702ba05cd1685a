"""
Conversion between http_message objects and h11 events.

h11 does the byte-level framing; this module only maps already parsed
events to immutable messages and back, so messages can be handed to an
h11.Connection or built from one.
"""

from typing import Iterator, List, Optional, Tuple, Type, TypeVar, Union

import h11

from .headers import HeaderBag
from .message import Message
from .request import Request
from .response import Response
from .streams import StreamFactory, StreamInterface
from .uri import Uri


RequestT = TypeVar("RequestT", bound=Request)

DEFAULT_CHUNK_SIZE = 65536


def _header_items(message: Message) -> List[Tuple[str, str]]:
    return list(message.headers.items())


def _headers_from_event(event: Union[h11.Request, h11.Response, h11.InformationalResponse]) -> HeaderBag:
    # raw_items() keeps the case the peer used
    return HeaderBag.from_items(
        (name.decode("latin-1"), value.decode("latin-1"))
        for name, value in event.headers.raw_items()
    )


def to_h11_request(request: Request) -> h11.Request:
    """
    Create the h11 event that starts ``request``.

    Raises:
        h11.LocalProtocolError: If h11 rejects the method, target or headers
    """
    return h11.Request(
        method=request.method,
        target=request.request_target,
        headers=_header_items(request),
        http_version=request.protocol_version,
    )


def to_h11_response(response: Response) -> Union[h11.Response, h11.InformationalResponse]:
    """Create the h11 event that starts ``response``; 1xx gives an informational one."""
    event_class = h11.InformationalResponse if response.status_code < 200 else h11.Response
    return event_class(
        status_code=response.status_code,
        headers=_header_items(response),
        reason=response.reason_phrase,
        http_version=response.protocol_version,
    )


def body_events(message: Message, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[h11.Event]:
    """
    Yield the body of ``message`` as h11.Data events, then EndOfMessage.

    A seekable body is rewound first so the whole body is sent.
    """
    body = message.body
    if body.seekable:
        body.rewind()

    while not body.eof():
        chunk = body.read(chunk_size)
        if chunk:
            yield h11.Data(data=chunk)

    yield h11.EndOfMessage()


def from_h11_request(
    event: h11.Request,
    scheme: str = "http",
    body: Optional[StreamInterface] = None,
    stream_factory: Optional[StreamFactory] = None,
    request_class: Type[RequestT] = Request,  # type: ignore[assignment]
) -> RequestT:
    """
    Build a request from an h11.Request event.

    Args:
        event: Event received from an h11 server connection
        scheme: Scheme the connection was accepted on
        body: Optional body stream
        stream_factory: Factory used to create an empty body lazily
        request_class: Request or a subclass such as ServerRequest

    Returns:
        New request instance
    """
    headers = _headers_from_event(event)
    target = event.target.decode("ascii")
    host = headers.get_line("host")

    explicit_target: Optional[str] = None
    if target.startswith("/"):
        uri = Uri.from_string(f"{scheme}://{host}{target}" if host else target)
    elif "://" in target:
        uri = Uri.from_string(target)
    else:
        # asterisk-form ("*") or authority-form (CONNECT host:port)
        uri = Uri.from_string(f"{scheme}://{host}") if host else Uri(scheme=scheme)
        explicit_target = target

    return request_class(
        headers=headers,
        stream=body,
        protocol_version=event.http_version.decode("ascii"),
        stream_factory=stream_factory,
        method=event.method.decode("ascii"),
        uri=uri,
        target=explicit_target,
    )


def from_h11_response(
    event: Union[h11.Response, h11.InformationalResponse],
    body: Optional[StreamInterface] = None,
    stream_factory: Optional[StreamFactory] = None,
) -> Response:
    """Build a response from an h11 response event."""
    return Response(
        headers=_headers_from_event(event),
        stream=body,
        protocol_version=event.http_version.decode("ascii"),
        stream_factory=stream_factory,
        status_code=event.status_code,
        reason=event.reason.decode("latin-1"),
    )
