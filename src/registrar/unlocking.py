"""UnlockingService — drain созревших lock с front очереди и push получателю.

Алгоритм (строго с front, без пересортировки по maturity):
1. Очередь пуста или front не созрел → NothingUnlockable, состояние не меняется
2. Пока remaining > 0 и front созрел:
   - front.amount <= remaining → entry снимается целиком
   - иначе front.amount уменьшается на remaining, entry остаётся на front
3. Released может быть меньше requested (не хватает созревшей ликвидности) —
   это не ошибка
4. Push released получателю; при отказе TransferFailed и очередь не меняется

Незрелый front блокирует drain всех entries за ним, даже если они уже созрели
(возможно после уменьшения lock_duration). Это сохраняет O(1) доступ к front.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.clock import HeightClock
from src.core.domain.lock import Lock
from src.core.domain.lock_queue import LockQueue
from src.core.domain.registrar_state import RegistrarState
from src.core.domain.units import is_positive_int
from src.core.errors import InvalidParameter, NothingUnlockable, TransferFailed
from src.custody.adapter import CustodyAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrainPlan:
    """План drain, вычисленный без изменения очереди."""

    released: int
    entries_consumed: int

    # Новый front после частичного снятия (None если front снят целиком или не тронут)
    front_remainder: Optional[Lock]


@dataclass(frozen=True)
class UnlockResult:
    """Результат unlock."""

    account: str
    recipient: str
    requested: int
    released: int
    entries_consumed: int
    front_remainder: Optional[Lock]

    # Диагностика
    height: int
    details: str

    @property
    def partial(self) -> bool:
        """Выпущено меньше, чем запрошено."""
        return self.released < self.requested


def plan_drain(queue: LockQueue, requested: int, current_height: int) -> DrainPlan:
    """
    Вычисление drain плана для очереди.

    Args:
        queue: Очередь аккаунта (не изменяется)
        requested: Запрошенное количество (> 0)
        current_height: Текущая высота

    Returns:
        DrainPlan с released = min(requested, сумма созревшего префикса)
    """
    remaining = requested
    released = 0
    consumed = 0
    remainder: Optional[Lock] = None

    for entry in queue:
        if remaining == 0 or not entry.is_mature(current_height):
            break

        if entry.amount <= remaining:
            released += entry.amount
            remaining -= entry.amount
            consumed += 1
            logger.debug("Drain: consume entry %d (amount=%d)", consumed, entry.amount)
        else:
            remainder = entry.reduced_by(remaining)
            released += remaining
            logger.debug(
                "Drain: partial entry amount=%d -> %d", entry.amount, remainder.amount
            )
            remaining = 0
            break

    return DrainPlan(released=released, entries_consumed=consumed, front_remainder=remainder)


def apply_drain(queue: LockQueue, plan: DrainPlan) -> None:
    """Применение плана: снятие consumed entries с front, замена частичного front."""
    for _ in range(plan.entries_consumed):
        queue.pop_front()
    if plan.front_remainder is not None:
        queue.replace_front(plan.front_remainder)


class UnlockingService:
    """Drain созревших lock и выплата из custody."""

    def __init__(self, state: RegistrarState, custody: CustodyAdapter, clock: HeightClock):
        self._state = state
        self._custody = custody
        self._clock = clock

    def unlock(self, caller: str, amount: int, account: Optional[str] = None) -> UnlockResult:
        """
        Выпуск до amount токенов из очереди account.

        Args:
            caller: Вызывающий аккаунт
            amount: Запрошенное количество
            account: Целевой аккаунт (None → caller). Получатель всегда
                     совпадает с аккаунтом, чья очередь дренируется.

        Returns:
            UnlockResult с фактически выпущенным количеством

        Raises:
            InvalidParameter: amount не положительное целое
            NothingUnlockable: очередь пуста или front не созрел
            TransferFailed: push из custody не прошёл
        """
        target = caller if account is None else account
        if not is_positive_int(amount):
            logger.warning("Rejected unlock for %s: invalid amount %r", target, amount)
            raise InvalidParameter(f"unlock amount must be a positive integer, got {amount!r}")

        height = self._clock.current_height()
        account_state = self._state.peek_account(target)
        queue = account_state.queue if account_state is not None else LockQueue()

        front = queue.front()
        if front is None or not front.is_mature(height):
            logger.warning("Nothing unlockable for %s at height %d", target, height)
            raise NothingUnlockable(target, height)

        plan = plan_drain(queue, amount, height)

        if not self._custody.push_from(target, plan.released):
            logger.warning("Unlock push failed: custody -> %s, amount=%d", target, plan.released)
            raise TransferFailed("push", target, plan.released)

        apply_drain(queue, plan)

        logger.info(
            "Unlocked %d of %d requested for %s at height %d (%d entries consumed)",
            plan.released, amount, target, height, plan.entries_consumed,
        )
        return UnlockResult(
            account=target,
            recipient=target,
            requested=amount,
            released=plan.released,
            entries_consumed=plan.entries_consumed,
            front_remainder=plan.front_remainder,
            height=height,
            details=f"caller={caller}, remaining_entries={len(queue)}",
        )
