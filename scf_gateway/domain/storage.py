"""Storage abstraction for ledger entities and per-entity locking"""

import copy
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Generic, Iterator, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    """Keyed store for one entity type; list() returns insertion order"""

    def get(self, entity_id: str) -> Optional[T]:
        ...

    def put(self, entity: T) -> None:
        ...

    def list(self) -> List[T]:
        ...


class InMemoryRepository(Generic[T]):
    """
    Dict-backed repository.

    Entities are deep-copied on the way in and out, so a caller mutating a
    returned object never changes stored state until it calls put().
    """

    def __init__(self) -> None:
        self._items: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            item = self._items.get(entity_id)
            return copy.deepcopy(item) if item is not None else None

    def put(self, entity: T) -> None:
        stored = copy.deepcopy(entity)
        with self._lock:
            self._items[stored.id] = stored

    def list(self) -> List[T]:
        with self._lock:
            return copy.deepcopy(list(self._items.values()))


class EntityLocks:
    """
    Lock per entity id; different ids never contend.

    An entry lives only while some thread holds or waits on it, so ids that
    are looked up once (including unknown ones) leave nothing behind.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, entity_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(entity_id, threading.Lock())
            self._users[entity_id] = self._users.get(entity_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[entity_id] -= 1
                if not self._users[entity_id]:
                    del self._users[entity_id]
                    del self._locks[entity_id]


class YearlySequence:
    """
    Document counter that restarts every calendar year.

    The count for a year is seeded from storage the first time that year is
    seen, then kept in memory.
    """

    def __init__(self, count_existing: Callable[[int], int]):
        self._count_existing = count_existing
        self._lock = threading.Lock()
        self._last: Dict[int, int] = {}

    def next(self, year: int) -> int:
        with self._lock:
            if year not in self._last:
                self._last[year] = self._count_existing(year)
            self._last[year] += 1
            return self._last[year]
