from typing import Any, Hashable, Optional, Protocol


class RangeCache(Protocol):
    """Where aggregates for a (kind, start, end) key may be kept between loads."""

    def get(self, key: Hashable) -> Optional[Any]:
        ...

    def put(self, key: Hashable, value: Any) -> None:
        ...


class NoCache:
    """Default: every dashboard load recomputes."""

    def get(self, key: Hashable) -> Optional[Any]:
        return None

    def put(self, key: Hashable, value: Any) -> None:
        pass


class MemoryCache:
    def __init__(self):
        self._data: dict[Hashable, Any] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        return self._data.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
