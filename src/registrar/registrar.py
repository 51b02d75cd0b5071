"""Registrar — публичная поверхность time-locked custody registrar.

Каждая операция выполняется целиком или не выполняется вовсе:
- lock / lock_for / unlock: одна очередь аккаунта + один custody transfer
- operator setters: одно поле ParameterStore

Host может вызывать registrar из нескольких потоков: lock/unlock
сериализуются per-account lock, setters — общим lock параметров.
"""

import logging
import threading
from typing import Optional

from src.access.operator_gate import OperatorGate
from src.core.clock import HeightClock
from src.core.config import RegistrarSettings
from src.core.domain.global_config import GlobalConfig
from src.core.domain.lock import Lock
from src.core.domain.registrar_state import RegistrarState
from src.core.errors import StateIntegrityError
from src.custody.adapter import CustodyAdapter
from src.params.parameter_store import ParameterStore
from src.storage.record import RegistrarStateRecord, capture_state, rebuild_state

from .locking import LockingService
from .unlocking import UnlockingService, UnlockResult

logger = logging.getLogger(__name__)


class Registrar:
    """Time-locked custody registrar.

    Args:
        custody: Адаптер внешнего ledger-токена
        clock: Источник текущей высоты
        settings: Параметры конструирования (default: RegistrarSettings())
        state: Готовое состояние (для restore); взаимоисключающе с settings
    """

    def __init__(
        self,
        custody: CustodyAdapter,
        clock: HeightClock,
        settings: Optional[RegistrarSettings] = None,
        state: Optional[RegistrarState] = None,
    ):
        if settings is not None and state is not None:
            raise ValueError("pass either settings or state, not both")

        if state is None:
            settings = settings or RegistrarSettings()
            state = RegistrarState(
                config=GlobalConfig(
                    token=settings.token,
                    operator=settings.operator,
                    lock_duration=settings.lock_duration,
                    lock_size=settings.lock_size,
                    rate=settings.rate,
                )
            )

        self._state = state
        self._custody = custody
        self._clock = clock

        self._params_lock = threading.Lock()
        self._account_locks: dict[str, threading.Lock] = {}
        self._account_locks_guard = threading.Lock()

        self._params = ParameterStore(
            state, OperatorGate(state.config.operator), self._params_lock
        )
        self._locking = LockingService(state, custody, clock)
        self._unlocking = UnlockingService(state, custody, clock)

        logger.info(
            "Registrar ready: token=%s operator=%s lock_duration=%d lock_size=%d",
            state.config.token, state.config.operator,
            state.config.lock_duration, state.config.lock_size,
        )

    # =========================================================================
    # LOCKING
    # =========================================================================

    def lock(self, caller: str, amount: Optional[int] = None) -> Lock:
        """Lock amount (или текущий lock_size) средств caller в его очередь."""
        with self._account_lock(caller):
            return self._locking.lock(caller, amount)

    def lock_for(self, caller: str, beneficiary: str, amount: Optional[int] = None) -> Lock:
        """Lock средств caller в очередь beneficiary."""
        with self._account_lock(beneficiary):
            return self._locking.lock_for(caller, beneficiary, amount)

    def get_lock(self, account: str) -> tuple[Lock, ...]:
        """Упорядоченная очередь аккаунта (read-only копия)."""
        account_lock = self._known_account_lock(account)
        if account_lock is None:
            return ()
        with account_lock:
            return self._locking.get_lock(account)

    # =========================================================================
    # UNLOCKING
    # =========================================================================

    def unlock(self, caller: str, amount: int, account: Optional[str] = None) -> UnlockResult:
        """Выпуск до amount созревших токенов из очереди account (default: caller)."""
        target = caller if account is None else account
        account_lock = self._known_account_lock(target)
        if account_lock is None:
            # пустая очередь: unlock отклоняется без записи в state
            return self._unlocking.unlock(caller, amount, account)
        with account_lock:
            return self._unlocking.unlock(caller, amount, account)

    # =========================================================================
    # PARAMETERS
    # =========================================================================

    @property
    def token(self) -> str:
        return self._params.token

    @property
    def operator(self) -> str:
        return self._params.operator

    @property
    def lock_duration(self) -> int:
        return self._params.lock_duration

    @property
    def lock_size(self) -> int:
        return self._params.lock_size

    @property
    def rate(self) -> int:
        return self._params.rate

    def penalty(self, account: str) -> int:
        return self._params.penalty(account)

    def set_lock_duration(self, caller: str, new_duration: int) -> None:
        self._params.set_lock_duration(caller, new_duration)

    def set_lock_size(self, caller: str, new_size: int) -> None:
        self._params.set_lock_size(caller, new_size)

    def set_rate(self, caller: str, new_rate: int) -> None:
        self._params.set_rate(caller, new_rate)

    def set_penalty(self, caller: str, account: str, value: int) -> None:
        self._params.set_penalty(caller, account, value)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def total_locked(self) -> int:
        """Сумма всех outstanding lock."""
        return self._state.total_locked()

    def snapshot(self) -> RegistrarStateRecord:
        """Согласованный снапшот состояния (блокирует все операции на время снятия)."""
        with self._account_locks_guard:
            locks = [self._account_locks[name] for name in sorted(self._account_locks)]
            for account_lock in locks:
                account_lock.acquire()
            try:
                with self._params_lock:
                    return capture_state(
                        self._state,
                        custody_balance=self._custody.custody_balance(),
                        height=self._clock.current_height(),
                    )
            finally:
                for account_lock in reversed(locks):
                    account_lock.release()

    @classmethod
    def restore(
        cls,
        record: RegistrarStateRecord,
        custody: CustodyAdapter,
        clock: HeightClock,
    ) -> "Registrar":
        """
        Registrar поверх сохранённого состояния.

        Raises:
            StateIntegrityError: Запись противоречива или сумма очередей
                не совпадает с текущим custody balance
        """
        state = rebuild_state(record)
        live_balance = custody.custody_balance()
        if state.total_locked() != live_balance:
            raise StateIntegrityError(
                f"conservation violated: locked {state.total_locked()} "
                f"!= live custody {live_balance}"
            )
        return cls(custody, clock, state=state)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _account_lock(self, account: str) -> threading.Lock:
        with self._account_locks_guard:
            return self._account_locks.setdefault(account, threading.Lock())

    def _known_account_lock(self, account: str) -> Optional[threading.Lock]:
        """Lock аккаунта с состоянием; None для имени, которое registrar не видел."""
        with self._account_locks_guard:
            if account not in self._account_locks and self._state.peek_account(account) is None:
                return None
            return self._account_locks.setdefault(account, threading.Lock())
