"""LockingService — создание lock и pull средств в custody.

Порядок:
1. Определение amount (явный или текущий lock_size)
2. Валидация amount и построение Lock (maturity = height + lock_duration)
3. Pull с caller в custody → при отказе TransferFailed, очередь не тронута
4. Append Lock в конец очереди beneficiary
"""

import logging
from typing import Optional

from src.core.clock import HeightClock
from src.core.domain.lock import Lock
from src.core.domain.registrar_state import RegistrarState
from src.core.domain.units import is_positive_int, maturity_height
from src.core.errors import InvalidParameter, TransferFailed
from src.custody.adapter import CustodyAdapter

logger = logging.getLogger(__name__)


class LockingService:
    """Создание lock в очереди аккаунта.

    Amount-less вариант (amount=None) подставляет текущий lock_size
    и использует ту же логику очереди.
    """

    def __init__(self, state: RegistrarState, custody: CustodyAdapter, clock: HeightClock):
        self._state = state
        self._custody = custody
        self._clock = clock

    def lock(self, caller: str, amount: Optional[int] = None) -> Lock:
        """Lock средств caller в его собственную очередь."""
        return self.lock_for(caller, caller, amount)

    def lock_for(self, caller: str, beneficiary: str, amount: Optional[int] = None) -> Lock:
        """
        Lock средств caller в очередь beneficiary.

        Args:
            caller: Аккаунт, с которого pull средств
            beneficiary: Аккаунт, в чью очередь добавляется Lock
            amount: Количество (None → текущий lock_size)

        Returns:
            Созданный Lock

        Raises:
            InvalidParameter: amount не положительное целое
            TransferFailed: pull в custody не прошёл
        """
        config = self._state.config
        if amount is None:
            amount = config.lock_size
        if not is_positive_int(amount):
            logger.warning("Rejected lock from %s: invalid amount %r", caller, amount)
            raise InvalidParameter(f"lock amount must be a positive integer, got {amount!r}")

        height = self._clock.current_height()
        entry = Lock(
            amount=amount,
            maturity_height=maturity_height(height, config.lock_duration),
        )

        if not self._custody.pull_into(caller, amount):
            logger.warning("Lock pull failed: %s -> custody, amount=%d", caller, amount)
            raise TransferFailed("pull", caller, amount)

        self._state.account(beneficiary).queue.append(entry)

        logger.info(
            "Locked %d for %s (funded by %s) at height %d, matures at %d",
            amount, beneficiary, caller, height, entry.maturity_height,
        )
        return entry

    def get_lock(self, account: str) -> tuple[Lock, ...]:
        """Упорядоченная копия очереди аккаунта (read-only)."""
        state = self._state.peek_account(account)
        if state is None:
            return ()
        return state.queue.snapshot()
