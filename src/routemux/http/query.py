"""Query string parameters.

Implements ``Mapping[str, str]`` with multi-valued lookups.
The dispatcher appends extracted path parameters with ``add``, so path
and query values share one lookup surface.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, urlencode


class QueryParams(Mapping[str, str]):
    """Query string parameters with append-only updates.

    Attributes:
        _data: Parsed query string as field name -> list of values.
        _raw: Raw query string bytes, re-encoded after every ``add``.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: bytes

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._data = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def add(self, key: str, value: str) -> None:
        """Append *value* to *key*. Existing values are kept."""
        self._data.setdefault(key, []).append(value)
        self._raw = self.encode().encode("latin-1")

    def encode(self) -> str:
        """Encode as ``key=value`` pairs, sorted by key, values in order."""
        pairs = [(key, value) for key in sorted(self._data) for value in self._data[key]]
        return urlencode(pairs)

    @property
    def raw(self) -> bytes:
        """The current query string bytes."""
        return self._raw
