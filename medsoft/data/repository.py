"""Collection repositories: read the whole collection, write it back whole."""

from __future__ import annotations

import copy
from typing import Generic, Iterable, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    def get_all(self) -> List[T]:
        ...

    def save_all(self, records: Iterable[T]) -> None:
        ...


class InMemoryRepository(Generic[T]):
    """Keeps a private copy of the collection in memory."""

    def __init__(self, records: Optional[Iterable[T]] = None) -> None:
        self._records: List[T] = copy.deepcopy(list(records or []))

    def get_all(self) -> List[T]:
        return copy.deepcopy(self._records)

    def save_all(self, records: Iterable[T]) -> None:
        self._records = copy.deepcopy(list(records))
