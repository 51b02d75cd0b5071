"""
ParameterStore — operator-gated глобальные tunables и per-account penalty

Порядок проверок каждого setter:
1. OperatorGate → Unauthorized (состояние не меняется)
2. Валидация значения → InvalidParameter (состояние не меняется)
3. Замена одного поля (атомарно: новый снапшот GlobalConfig или одно int значение)

Изменение lock_duration влияет только на будущие lock: maturity_height
существующих entries фиксирована при создании.
"""

import logging
import threading
from typing import Optional

from src.access.operator_gate import OperatorGate
from src.core.domain.global_config import GlobalConfig
from src.core.domain.registrar_state import RegistrarState
from src.core.domain.units import is_non_negative_int, is_positive_int
from src.core.errors import InvalidParameter

logger = logging.getLogger(__name__)


class ParameterStore:
    """Хранилище глобальных параметров и penalty.

    Все setters сериализуются одним lock; чтение — по ссылке на immutable
    снапшот GlobalConfig, поэтому читатели всегда видят согласованный конфиг.
    """

    def __init__(
        self,
        state: RegistrarState,
        gate: Optional[OperatorGate] = None,
        lock: Optional[threading.Lock] = None,
    ):
        self._state = state
        self._gate = gate or OperatorGate(state.config.operator)
        self._lock = lock or threading.Lock()

    # =========================================================================
    # READ ACCESSORS
    # =========================================================================

    @property
    def config(self) -> GlobalConfig:
        """Текущий снапшот конфига."""
        return self._state.config

    @property
    def token(self) -> str:
        return self._state.config.token

    @property
    def operator(self) -> str:
        return self._state.config.operator

    @property
    def lock_duration(self) -> int:
        return self._state.config.lock_duration

    @property
    def lock_size(self) -> int:
        return self._state.config.lock_size

    @property
    def rate(self) -> int:
        return self._state.config.rate

    def penalty(self, account: str) -> int:
        """Penalty аккаунта (0 для неизвестного аккаунта)."""
        state = self._state.peek_account(account)
        return state.penalty if state is not None else 0

    # =========================================================================
    # OPERATOR SETTERS
    # =========================================================================

    def set_lock_duration(self, caller: str, new_duration: int) -> None:
        """
        Замена длительности lock для будущих lock.

        Raises:
            Unauthorized: caller не operator
            InvalidParameter: new_duration == 0 (или не положительное целое)
        """
        self._gate.require(caller, "set_lock_duration")
        if not is_positive_int(new_duration):
            self._reject("set_lock_duration", new_duration)
        self._replace("lock_duration", new_duration)

    def set_lock_size(self, caller: str, new_size: int) -> None:
        """
        Замена фиксированного amount для amount-less lock.

        Raises:
            Unauthorized: caller не operator
            InvalidParameter: new_size == 0 (или не положительное целое)
        """
        self._gate.require(caller, "set_lock_size")
        if not is_positive_int(new_size):
            self._reject("set_lock_size", new_size)
        self._replace("lock_size", new_size)

    def set_rate(self, caller: str, new_rate: int) -> None:
        """
        Публикация reward rate. Registrar его не потребляет.

        Raises:
            Unauthorized: caller не operator
            InvalidParameter: new_rate не целое число
        """
        self._gate.require(caller, "set_rate")
        if isinstance(new_rate, bool) or not isinstance(new_rate, int):
            self._reject("set_rate", new_rate)
        self._replace("rate", new_rate)

    def set_penalty(self, caller: str, account: str, value: int) -> None:
        """
        Установка penalty аккаунта (включая 0 — очистка).

        Значение только хранится: ни lock, ни unlock его не читают.

        Raises:
            Unauthorized: caller не operator
            InvalidParameter: value не целое >= 0
        """
        self._gate.require(caller, "set_penalty")
        if not is_non_negative_int(value):
            self._reject("set_penalty", value)

        with self._lock:
            account_state = self._state.account(account)
            previous = account_state.penalty
            account_state.penalty = value

        logger.info("Penalty for %s changed %d -> %d", account, previous, value)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _replace(self, field_name: str, value: int) -> None:
        with self._lock:
            previous = getattr(self._state.config, field_name)
            self._state.config = self._state.config.with_value(field_name, value)

        logger.info("Config %s changed %s -> %s", field_name, previous, value)

    def _reject(self, operation: str, value: object) -> None:
        logger.warning("Rejected %s: invalid value %r", operation, value)
        raise InvalidParameter(f"{operation}: invalid value {value!r}")
