"""In-memory repositories.

Every repository keeps a plain list guarded by a re-entrant lock. Writes are
serialized through the lock and reads hand back deep copies, so callers work
on a snapshot and can never mutate stored state by accident. Services that
need a read-modify-write sequence wrap it in ``with repo.locked():``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from pokeleague.core.battle import Battle, BattleResult
from pokeleague.core.pokemon import Pokemon
from pokeleague.core.trainer import Trainer
from pokeleague.core.user import User
from pokeleague.utils.helpers import normalize_name


ModelT = TypeVar("ModelT", bound=BaseModel)


class InMemoryRepository(Generic[ModelT]):
    """List-backed store keyed by a sequential integer id."""

    def __init__(self) -> None:
        self._items: list[ModelT] = []
        self._next_id = 1
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[InMemoryRepository[ModelT]]:
        """Hold the repository lock across several calls."""
        with self._lock:
            yield self

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _index_of(self, item_id: int) -> int | None:
        for i, item in enumerate(self._items):
            if item.id == item_id:
                return i
        return None

    def get_all(self) -> list[ModelT]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items]

    def find(self, predicate: Callable[[ModelT], bool]) -> list[ModelT]:
        """Copies of every stored item matching ``predicate``."""
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items if predicate(item)]

    def find_first(self, predicate: Callable[[ModelT], bool]) -> ModelT | None:
        with self._lock:
            for item in self._items:
                if predicate(item):
                    return item.model_copy(deep=True)
            return None

    def get_by_id(self, item_id: int) -> ModelT | None:
        with self._lock:
            index = self._index_of(item_id)
            if index is None:
                return None
            return self._items[index].model_copy(deep=True)

    def add(self, item: ModelT) -> ModelT:
        """Store a copy of ``item`` under the next id and return it."""
        with self._lock:
            stored = item.model_copy(deep=True, update={"id": self._next_id})
            self._next_id += 1
            self._items.append(stored)
            return stored.model_copy(deep=True)

    def update(self, item: ModelT) -> bool:
        """Replace the stored item with the same id, returns False if absent."""
        with self._lock:
            index = self._index_of(item.id)
            if index is None:
                return False
            self._items[index] = item.model_copy(deep=True)
            return True

    def delete(self, item_id: int) -> bool:
        with self._lock:
            index = self._index_of(item_id)
            if index is None:
                return False
            del self._items[index]
            return True


class PokemonRepository(InMemoryRepository[Pokemon]):
    """Registered Pokemon."""

    def get_by_name(self, name: str) -> Pokemon | None:
        key = normalize_name(name)
        return self.find_first(lambda p: normalize_name(p.name) == key)


class TrainerRepository(InMemoryRepository[Trainer]):
    """League trainers."""

    def get_by_name(self, name: str) -> Trainer | None:
        key = normalize_name(name)
        return self.find_first(lambda t: normalize_name(t.name) == key)


class BattleRepository(InMemoryRepository[Battle]):
    """Battle records with the usual history queries.

    Date filters compare calendar days, ignoring time of day.
    """

    def get_by_trainer(self, trainer_id: int) -> list[Battle]:
        return self.find(lambda b: b.involves(trainer_id))

    def get_between(self, trainer1_id: int, trainer2_id: int) -> list[Battle]:
        """Battles between two trainers, in either slot order."""
        pair = {trainer1_id, trainer2_id}
        return self.find(lambda b: {b.trainer1_id, b.trainer2_id} == pair)

    def get_by_date(self, day: date | datetime) -> list[Battle]:
        day = _as_date(day)
        return self.find(lambda b: b.battle_date.date() == day)

    def get_by_date_range(self, start: date | datetime, end: date | datetime) -> list[Battle]:
        """Battles dated from ``start`` to ``end``, both days inclusive."""
        first, last = _as_date(start), _as_date(end)
        return self.find(lambda b: first <= b.battle_date.date() <= last)

    def get_by_result(self, result: BattleResult) -> list[Battle]:
        return self.find(lambda b: b.result is result)


class UserRepository(InMemoryRepository[User]):
    """API accounts. Username and email lookups ignore case."""

    def get_by_username(self, username: str) -> User | None:
        key = normalize_name(username)
        return self.find_first(lambda u: normalize_name(u.username) == key)

    def get_by_email(self, email: str) -> User | None:
        key = normalize_name(email)
        return self.find_first(lambda u: normalize_name(u.email) == key)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value
