"""
Case-insensitive header storage for http_message.

HeaderBag keeps the header names exactly as they were supplied while
looking them up case-insensitively. Like every other value in this
package it is immutable: set, add and remove return a new bag.
"""

from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)


HeaderValue = Union[str, int, Iterable[Union[str, int]]]
HeaderInput = Union["HeaderBag", Mapping[str, HeaderValue]]


def _normalize_values(value: HeaderValue) -> Tuple[str, ...]:
    """Turn a scalar or a sequence of values into a tuple of strings."""
    if isinstance(value, (str, bytes, int)):
        value = [value]
    return tuple(
        item.decode("latin-1") if isinstance(item, bytes) else str(item)
        for item in value
    )


class HeaderBag:
    """
    Case-insensitive, case-preserving, multi-value header store.

    Each logical header has exactly one canonical name (the case it was
    last set with) and an ordered tuple of values. Value order is kept
    and is the order used when the header is rendered as a single line.
    """

    __slots__ = ("_values", "_keys")

    def __init__(self, headers: Optional[HeaderInput] = None) -> None:
        self._values: Dict[str, Tuple[str, ...]] = {}
        self._keys: Dict[str, str] = {}
        if headers is None:
            return

        if isinstance(headers, HeaderBag):
            self._values = dict(headers._values)
            self._keys = dict(headers._keys)
            return

        for name, value in headers.items():
            self._merge(name, _normalize_values(value))

    @classmethod
    def from_items(cls, items: Iterable[Tuple[str, HeaderValue]]) -> "HeaderBag":
        """Build a bag from ``(name, value)`` pairs; repeated names are merged."""
        bag = cls()
        for name, value in items:
            bag._merge(name, _normalize_values(value))
        return bag

    def _merge(self, name: str, values: Tuple[str, ...]) -> None:
        # Only ever called while a bag is being built.
        canonical = self._keys.get(name.lower(), name)
        self._values[canonical] = self._values.get(canonical, ()) + values
        self._keys[canonical.lower()] = canonical

    def _copy(self) -> "HeaderBag":
        return HeaderBag(self)

    def has(self, name: str) -> bool:
        """Check if a header exists (case-insensitive)."""
        return name.lower() in self._keys

    def canonical_name(self, name: str) -> Optional[str]:
        """Get the stored case of a header name, or None if it is absent."""
        return self._keys.get(name.lower())

    def get(self, name: str) -> List[str]:
        """Get all values of a header, or an empty list if it is absent."""
        canonical = self._keys.get(name.lower())
        if canonical is None:
            return []
        return list(self._values[canonical])

    def get_line(self, name: str) -> str:
        """Get the values of a header joined by commas."""
        return ",".join(self.get(name))

    def set(self, name: str, value: HeaderValue, first: bool = False) -> "HeaderBag":
        """
        Return a new bag where ``name`` replaces any existing header.

        Args:
            name: Header name; its case becomes the canonical case
            value: A single value or a sequence of values
            first: Move the header to the front of the bag

        Returns:
            New HeaderBag instance
        """
        values = _normalize_values(value)
        existing = self._keys.get(name.lower())
        if existing is not None and not first:
            return self._replace_entry(existing, name, values)

        bag = self.remove(name)
        if first:
            bag._values = {name: values, **bag._values}
        else:
            bag._values[name] = values
        bag._keys[name.lower()] = name
        return bag

    def add(self, name: str, value: HeaderValue) -> "HeaderBag":
        """
        Return a new bag with ``value`` appended to the header's values.

        If the header is not set yet this behaves exactly like set(),
        otherwise the existing canonical name is kept.
        """
        values = _normalize_values(value)
        existing = self._keys.get(name.lower())
        if existing is None:
            return self.set(name, values)
        return self._replace_entry(existing, existing, self._values[existing] + values)

    def _replace_entry(
        self, existing: str, name: str, values: Tuple[str, ...]
    ) -> "HeaderBag":
        # Keeps the header at its current position.
        bag = self._copy()
        bag._values = {
            (name if key == existing else key): (values if key == existing else current)
            for key, current in self._values.items()
        }
        bag._keys[name.lower()] = name
        return bag

    def remove(self, name: str) -> "HeaderBag":
        """Return a new bag without the header (case-insensitive)."""
        bag = self._copy()
        canonical = bag._keys.pop(name.lower(), None)
        if canonical is not None:
            del bag._values[canonical]
        return bag

    def all(self) -> Dict[str, List[str]]:
        """Get a copy of every header, keyed by canonical name."""
        return {name: list(values) for name, values in self._values.items()}

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate over ``(name, value)`` pairs, one pair per value."""
        for name, values in self._values.items():
            for value in values:
                yield name, value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderBag):
            return NotImplemented
        return list(self._values.items()) == list(other._values.items())

    def __repr__(self) -> str:
        return f"HeaderBag({self.all()!r})"
