"""
URI value type for http_message.

A Uri is validated and normalized component by component when it is
built. It never changes afterwards; the with_* methods return new
instances.
"""

import ipaddress
import re
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote, urlsplit

from .exceptions import (
    InvalidArgumentError,
    InvalidPortError,
    InvalidSchemeError,
    UriParseError,
)


# Known schemes and their default ports (0 means "no default port")
SCHEME_PORTS: Dict[str, int] = {
    "file": 0,
    "http": 80,
    "https": 443,
    "ftp": 21,
    "scp": 22,
}

_PATH_CHARS = r"a-zA-Z0-9_\-.~!$&'()*+,;=%:@/"
_PATH_PATTERN = re.compile(r"(?:[^" + _PATH_CHARS + r"]+|%(?![A-Fa-f0-9]{2}))")
_QUERY_PATTERN = re.compile(r"(?:[^" + _PATH_CHARS + r"?]+|%(?![A-Fa-f0-9]{2}))")


def _encode(pattern: "re.Pattern[str]", value: str) -> str:
    """Percent-encode everything ``pattern`` matches; valid triplets are kept."""
    return pattern.sub(lambda match: quote(match.group(0), safe=""), value)


def _require_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{name} must be a string, got {type(value).__name__}")
    return value


def filter_scheme(scheme: Any) -> str:
    scheme = _require_string("scheme", scheme).lower().replace("://", "")
    if scheme and scheme not in SCHEME_PORTS:
        raise InvalidSchemeError(scheme)
    return scheme


def filter_host(host: Any) -> str:
    host = _require_string("host", host)
    try:
        ipaddress.IPv6Address(host)
    except ValueError:
        pass
    else:
        host = f"[{host}]"
    return host.lower()


def filter_port(port: Any) -> Optional[int]:
    if port is None:
        return None
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidPortError(port)
    if port < 1 or port > 65535:
        raise InvalidPortError(port)
    return port


def filter_path(path: Any) -> str:
    path = _require_string("path", path) or "/"
    return _encode(_PATH_PATTERN, path)


def filter_query(query: Any) -> str:
    query = _require_string("query", query).lstrip("?")
    return _encode(_QUERY_PATTERN, query)


def filter_fragment(fragment: Any) -> str:
    fragment = _require_string("fragment", fragment).lstrip("#")
    return _encode(_QUERY_PATTERN, fragment)


class Uri:
    """
    Immutable representation of a URI.

    The explicit port is kept apart from the effective one: ``port``
    falls back to the scheme's default port when none was given.
    """

    __slots__ = (
        "_scheme",
        "_user",
        "_password",
        "_host",
        "_port",
        "_path",
        "_query",
        "_fragment",
    )

    def __init__(
        self,
        scheme: str = "",
        user: str = "",
        password: str = "",
        host: str = "",
        port: Optional[int] = None,
        path: str = "/",
        query: str = "",
        fragment: str = "",
    ) -> None:
        self._scheme = filter_scheme(scheme)
        self._user = _require_string("user", user)
        self._password = _require_string("password", password)
        self._host = filter_host(host)
        self._port = filter_port(port)
        self._path = filter_path(path)
        self._query = filter_query(query)
        self._fragment = filter_fragment(fragment)

    @classmethod
    def from_string(cls, uri: str) -> "Uri":
        """
        Parse a URI string.

        Args:
            uri: URI reference, e.g. ``https://user:pw@example.com:8443/a?b#c``

        Returns:
            New Uri instance

        Raises:
            UriParseError: If the string is not a parseable URI
        """
        uri = _require_string("uri", uri)
        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError as e:
            raise UriParseError(uri, cause=e) from e

        # "http:///path" has a scheme separator but no authority
        has_authority_marker = uri.lower().startswith(f"{parts.scheme}://")
        if parts.scheme not in ("", "file") and has_authority_marker and not parts.netloc:
            raise UriParseError(uri)

        return cls(
            scheme=parts.scheme,
            user=parts.username or "",
            password=parts.password or "",
            host=parts.hostname or "",
            port=port,
            path=parts.path or "/",
            query=parts.query,
            fragment=parts.fragment,
        )

    def _replace(self, **changes: Any) -> "Uri":
        fields = {
            "scheme": self._scheme,
            "user": self._user,
            "password": self._password,
            "host": self._host,
            "port": self._port,
            "path": self._path,
            "query": self._query,
            "fragment": self._fragment,
        }
        fields.update(changes)
        return Uri(**fields)

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def user(self) -> str:
        return self._user

    @property
    def password(self) -> str:
        return self._password

    @property
    def user_info(self) -> str:
        """User information in ``user[:password]`` format."""
        if self._user and self._password:
            return f"{self._user}:{self._password}"
        return self._user

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> Optional[int]:
        """The explicit port, else the scheme's default port, else None."""
        if self._port:
            return self._port
        return self.default_port

    @property
    def default_port(self) -> Optional[int]:
        return SCHEME_PORTS.get(self._scheme) or None

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> str:
        return self._query

    @property
    def fragment(self) -> str:
        return self._fragment

    @property
    def authority(self) -> str:
        """The ``[user-info@]host[:port]`` part; a default port is left out."""
        authority = self._host
        if self.user_info:
            authority = f"{self.user_info}@{authority}"

        port = self.port
        if port is not None and port != self.default_port:
            authority = f"{authority}:{port}"
        return authority

    def with_scheme(self, scheme: str) -> "Uri":
        return self._replace(scheme=scheme)

    def with_user_info(self, user: str, password: str = "") -> "Uri":
        return self._replace(user=user, password=password)

    def with_host(self, host: str) -> "Uri":
        return self._replace(host=host)

    def with_port(self, port: Optional[int]) -> "Uri":
        """Create a new URI with a different port; None removes the port."""
        return self._replace(port=port)

    def with_path(self, path: str) -> "Uri":
        return self._replace(path=path)

    def with_query(self, query: str) -> "Uri":
        return self._replace(query=query)

    def with_fragment(self, fragment: str) -> "Uri":
        return self._replace(fragment=fragment)

    def _key(self) -> Tuple[Any, ...]:
        return (
            self._scheme,
            self._user,
            self._password,
            self._host,
            self._port,
            self._path,
            self._query,
            self._fragment,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uri):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        uri = ""
        if self._scheme:
            uri += f"{self._scheme}://"
        uri += self.authority
        uri += "/" + self._path.lstrip("/")
        if self._query:
            uri += f"?{self._query}"
        if self._fragment:
            uri += f"#{self._fragment}"
        return uri

    def __repr__(self) -> str:
        return f"Uri({str(self)!r})"
