"""
Ordered parameter list for the legacy signed calling convention.

The legacy API verifies a signature over the URL-encoded parameter string, so
parameters keep their insertion order and render identically every time.
"""

import ipaddress
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import quote_plus

# Name of the placeholder that stands in for an empty collection
EMPTY_COLLECTION_PARAM = "anything"


def format_param_value(value: Any) -> str:
    """Render a scalar the way the legacy API expects it in signatures."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_param_value(value.value)
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(value)
    raise TypeError(f"unsupported parameter value type {type(value).__name__}")


class ParameterList:
    """Sequence of ``(name, value)`` pairs where order is significant."""

    def __init__(self, pairs: Optional[Sequence[Tuple[str, str]]] = None):
        self._names: List[str] = []
        self._values: List[str] = []
        for name, value in pairs or ():
            self.set(name, value)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(zip(self._names, self._values))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParameterList):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"ParameterList({list(self)!r})"

    def set(self, name: str, value: str) -> None:
        """Set ``name`` to a string value, replacing an existing value in place."""
        try:
            self._values[self._names.index(name)] = value
        except ValueError:
            self._names.append(name)
            self._values.append(value)

    def set_multi(self, name: str, values: Sequence[Any]) -> None:
        """Add ``name[0]``, ``name[1]``, ... for each value."""
        for index, value in enumerate(values):
            self.set(f"{name}[{index}]", format_param_value(value))

    def add(self, name: str, value: Any) -> None:
        """Add a scalar or a list of scalars, converting it to its string form."""
        if isinstance(value, (list, tuple)):
            self.set_multi(name, value)
        else:
            self.set(name, format_param_value(value))

    def get(self, name: str) -> str:
        """Return the value of ``name``.

        Raises:
            KeyError: If the parameter is not set.
        """
        try:
            return self._values[self._names.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def copy(self) -> "ParameterList":
        return ParameterList(list(self))

    def encode(self) -> str:
        """Render as ``name=value&...``; names verbatim, values URL-escaped."""
        return "&".join(f"{name}={quote_plus(value, safe='')}" for name, value in self)
