"""
Request reconstruction from a CGI-style environment.

The hosting transport hands over a flat mapping such as a WSGI environ
or a CGI process environment. This module turns it into the primitive
values a ServerRequest is built from: method, URI string, headers and
cookies. Nothing here performs I/O.
"""

import ipaddress
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple
from urllib.parse import unquote_plus

from .exceptions import InvalidPortError

logger = logging.getLogger(__name__)


DEFAULT_METHOD = "GET"
DEFAULT_HOST = "undefined"
DEFAULT_PORT = 80
DEFAULT_REQUEST_URI = "/"

# Checked in order, the first key present wins
HOST_KEYS: Tuple[str, ...] = ("HTTP_HOST", "SERVER_NAME", "SERVER_ADDR")

# Header keys the transport passes without the HTTP_ prefix
SPECIAL_HEADERS = frozenset({
    "CONTENT_TYPE",
    "CONTENT_LENGTH",
    "CONTENT_MD5",
    "PHP_AUTH_USER",
    "PHP_AUTH_PW",
    "PHP_AUTH_DIGEST",
    "AUTH_TYPE",
    "COOKIE",
})

# Some servers duplicate CONTENT_LENGTH under this key
SKIPPED_HEADERS = frozenset({"HTTP_CONTENT_LENGTH"})

_COOKIE_SEPARATOR = re.compile(r";\s*")
_HOST_PORT = re.compile(r"^(?P<host>[^\[\]:]+|\[[^\]]*\]):\d*$")


class EnvironmentSnapshot(NamedTuple):
    """The request data recovered from an environment."""
    method: str
    uri: str
    headers: Dict[str, List[str]]
    cookies: Dict[str, str]


def _is_ipv6(host: str) -> bool:
    try:
        ipaddress.IPv6Address(host)
    except ValueError:
        return False
    return True


def _present(environ: Mapping[str, Any], key: str) -> bool:
    return environ.get(key) is not None


def get_method(environ: Mapping[str, Any]) -> str:
    if _present(environ, "REQUEST_METHOD"):
        return str(environ["REQUEST_METHOD"]).upper()
    return DEFAULT_METHOD


def get_scheme(environ: Mapping[str, Any]) -> str:
    https = environ.get("HTTPS")
    if https is None or str(https) in ("", "0", "off"):
        return "http"
    return "https"


def get_user_info(environ: Mapping[str, Any]) -> str:
    if not _present(environ, "PHP_AUTH_USER"):
        return ""

    user_info = str(environ["PHP_AUTH_USER"])
    if _present(environ, "PHP_AUTH_PW"):
        user_info += f":{environ['PHP_AUTH_PW']}"
    return user_info


def _host_from(key: str) -> Callable[[Mapping[str, Any]], Optional[str]]:
    def extract(environ: Mapping[str, Any]) -> Optional[str]:
        if not _present(environ, key):
            return None
        host = str(environ[key])
        if _is_ipv6(host):
            return f"[{host}]"
        # A Host header may carry a port; the port comes from SERVER_PORT.
        match = _HOST_PORT.match(host)
        return match.group("host") if match else host

    extract.__name__ = f"host_from_{key.lower()}"
    return extract


HOST_EXTRACTORS: Tuple[Callable[[Mapping[str, Any]], Optional[str]], ...] = tuple(
    _host_from(key) for key in HOST_KEYS
)


def get_host(environ: Mapping[str, Any]) -> str:
    """Get the host from the first candidate key that is present."""
    for extract in HOST_EXTRACTORS:
        host = extract(environ)
        if host is not None:
            logger.debug(f"Host {host!r} resolved by {extract.__name__}")
            return host

    logger.debug(f"No host in environment, using {DEFAULT_HOST!r}")
    return DEFAULT_HOST


def get_port(environ: Mapping[str, Any]) -> int:
    if _present(environ, "SERVER_PORT"):
        try:
            return int(environ["SERVER_PORT"])
        except ValueError as e:
            raise InvalidPortError(environ["SERVER_PORT"]) from e
    return DEFAULT_PORT


def get_request_uri(environ: Mapping[str, Any]) -> str:
    if _present(environ, "REQUEST_URI"):
        return str(environ["REQUEST_URI"])
    return DEFAULT_REQUEST_URI


def get_uri_string(environ: Mapping[str, Any]) -> str:
    """Assemble ``scheme://[user-info@]host:port/request-uri``."""
    uri = f"{get_scheme(environ)}://"

    user_info = get_user_info(environ)
    if user_info:
        uri += f"{user_info}@"

    uri += f"{get_host(environ)}:{get_port(environ)}"
    uri += get_request_uri(environ)
    return uri


def get_headers(
    environ: Mapping[str, Any],
    ambient_headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, List[str]]:
    """
    Rebuild the request headers.

    Args:
        environ: Environment map
        ambient_headers: Headers the runtime already gathered, if any

    Returns:
        Mapping of upper-cased header name to its values
    """
    headers: Dict[str, List[str]] = {
        name.upper(): [value] for name, value in (ambient_headers or {}).items()
    }

    for key, value in environ.items():
        if not isinstance(key, str):
            continue
        name = key.upper()

        if name in SKIPPED_HEADERS:
            continue

        if name.startswith("HTTP_"):
            name = name[len("HTTP_"):]
        elif name not in SPECIAL_HEADERS:
            continue

        name = name.replace("_", "-")
        headers[name] = [piece.strip() for piece in str(value).split(",")]

    return headers


def parse_cookies(value: str) -> Dict[str, str]:
    """
    Parse a Cookie header value.

    Pairs without ``=`` are ignored and the first occurrence of a name
    wins.
    """
    cookies: Dict[str, str] = {}

    for piece in _COOKIE_SEPARATOR.split(value.rstrip("\r\n")):
        key, sep, cookie = piece.partition("=")
        if not sep:
            continue
        key = unquote_plus(key)
        if key not in cookies:
            cookies[key] = unquote_plus(cookie)

    return cookies


def _first_header(headers: Mapping[str, List[str]], name: str) -> str:
    for key, values in headers.items():
        if key.lower() == name.lower() and values:
            return values[0]
    return ""


def from_environment(
    environ: Mapping[str, Any],
    ambient_headers: Optional[Mapping[str, str]] = None,
) -> EnvironmentSnapshot:
    """
    Recover method, URI, headers and cookies from an environment.

    Args:
        environ: CGI-style environment map (REQUEST_METHOD, HTTP_*, ...)
        ambient_headers: Headers the runtime already gathered, if any

    Returns:
        EnvironmentSnapshot with the reconstructed values
    """
    headers = get_headers(environ, ambient_headers)
    snapshot = EnvironmentSnapshot(
        method=get_method(environ),
        uri=get_uri_string(environ),
        headers=headers,
        cookies=parse_cookies(_first_header(headers, "cookie")),
    )

    logger.debug(
        f"Reconstructed {snapshot.method} {get_request_uri(environ)} "
        f"with {len(headers)} headers and {len(snapshot.cookies)} cookies"
    )
    return snapshot
