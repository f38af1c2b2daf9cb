from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

HeaderInput = Union[Mapping[str, Union[str, Iterable[str]]], Iterable[Tuple[str, str]]]


class Headers:
    """
    Ordered multimap of header name -> list of values.

    Lookups are case-insensitive; the spelling used the first time a name
    is added is kept for output.
    """

    def __init__(self, headers: Optional[HeaderInput] = None) -> None:
        # lowercased name -> (original name, values)
        self._store: Dict[str, Tuple[str, List[str]]] = {}
        if headers:
            self.update(headers)

    def add(self, name: str, value: str) -> None:
        """Append a value under ``name``."""
        key = name.lower()
        entry = self._store.get(key)
        if entry is None:
            self._store[key] = (name, [value])
        else:
            entry[1].append(value)

    def set(self, name: str, value: str) -> None:
        """Replace every value of ``name`` with a single value."""
        key = name.lower()
        entry = self._store.get(key)
        original = entry[0] if entry else name
        self._store[key] = (original, [value])

    def update(self, headers: HeaderInput) -> None:
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            if isinstance(value, (list, tuple)):
                for item in value:
                    self.add(name, item)
            else:
                self.add(name, value)

    def get_list(self, name: str) -> List[str]:
        entry = self._store.get(name.lower())
        return list(entry[1]) if entry else []

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value of ``name``."""
        entry = self._store.get(name.lower())
        if not entry or not entry[1]:
            return default
        return entry[1][0]

    def remove(self, name: str) -> None:
        self._store.pop(name.lower(), None)

    def items(self) -> List[Tuple[str, str]]:
        """Flattened (name, value) pairs in insertion order."""
        return [(name, value) for name, values in self._store.values() for value in values]

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self._store.values()}

    def copy(self) -> "Headers":
        clone = Headers()
        clone._store = {key: (name, list(values)) for key, (name, values) in self._store.items()}
        return clone

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._store

    def __getitem__(self, name: str) -> List[str]:
        entry = self._store.get(name.lower())
        if entry is None:
            raise KeyError(name)
        return list(entry[1])

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self.to_dict() == other.to_dict()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self.to_dict()!r})"


__all__ = ["Headers"]
