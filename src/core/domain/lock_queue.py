"""
LockQueue — очередь депозитов аккаунта в порядке вставки

Операции O(1): append в конец, чтение/удаление/замена front entry.
Очередь никогда не пересортировывается по maturity_height.
"""

from collections import deque
from typing import Iterable, Iterator, Optional

from .lock import Lock


class LockQueue:
    """
    Insertion-ordered очередь Lock.

    Инварианты:
    - Порядок entries = порядок вставки
    - Каждый entry имеет amount > 0 (гарантируется моделью Lock)
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Iterable[Lock]] = None):
        self._entries: deque[Lock] = deque(entries or ())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[Lock]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Lock:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"LockQueue({list(self._entries)!r})"

    def append(self, lock: Lock) -> None:
        """Добавить lock в конец очереди."""
        self._entries.append(lock)

    def front(self) -> Optional[Lock]:
        """Front entry или None для пустой очереди."""
        return self._entries[0] if self._entries else None

    def pop_front(self) -> Lock:
        """Удалить и вернуть front entry."""
        return self._entries.popleft()

    def replace_front(self, lock: Lock) -> None:
        """Заменить front entry на месте (частичный unlock)."""
        if not self._entries:
            raise IndexError("replace_front on empty queue")
        self._entries[0] = lock

    def total_amount(self) -> int:
        """Сумма amount всех entries."""
        return sum(entry.amount for entry in self._entries)

    def snapshot(self) -> tuple[Lock, ...]:
        """Неизменяемая копия очереди (Lock immutable, копия поверхностная)."""
        return tuple(self._entries)
