"""
RegistrarStateRecord — версионированная запись core-состояния

Pydantic модель, совместимая с JSON Schema (contracts/schema/registrar_state.json).
Поля идут в порядке STORAGE_LAYOUT; поля, добавленные в поздних версиях layout,
имеют дефолты, чтобы запись старой версии читалась новой логикой.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from src.core.domain.account_state import AccountState
from src.core.domain.global_config import GlobalConfig
from src.core.domain.lock import Lock
from src.core.domain.lock_queue import LockQueue
from src.core.domain.registrar_state import RegistrarState
from src.core.domain.units import DEFAULT_LOCK_SIZE, DEFAULT_RATE
from src.core.errors import StateIntegrityError

from .layout import LAYOUT_VERSION

logger = logging.getLogger(__name__)


# =============================================================================
# NESTED MODELS
# =============================================================================


class LockRecord(BaseModel):
    """Сохранённый Lock."""

    amount: int = Field(..., gt=0)
    maturity_height: int = Field(..., ge=0)

    model_config = {"frozen": True}


class AccountRecord(BaseModel):
    """Сохранённая очередь аккаунта (в порядке вставки)."""

    account: str = Field(..., min_length=1)
    queue: list[LockRecord] = Field(default_factory=list)

    model_config = {"frozen": True}


# =============================================================================
# STATE RECORD
# =============================================================================


class RegistrarStateRecord(BaseModel):
    """
    Снапшот core-состояния для storage boundary.

    layout v1: token, operator, lock_duration, accounts
    layout v2: + lock_size
    layout v3: + rate, penalties, custody_balance, captured_at_height
    """

    layout_version: int = Field(default=LAYOUT_VERSION, ge=1)

    # v1
    token: str = Field(..., min_length=1)
    operator: str = Field(..., min_length=1)
    lock_duration: int = Field(..., gt=0)
    accounts: list[AccountRecord] = Field(default_factory=list)

    # v2
    lock_size: int = Field(default=DEFAULT_LOCK_SIZE, gt=0)

    # v3
    rate: int = Field(default=DEFAULT_RATE)
    penalties: dict[str, int] = Field(default_factory=dict)
    custody_balance: Optional[int] = Field(
        default=None, ge=0, description="Custody balance в момент снапшота"
    )
    captured_at_height: Optional[int] = Field(default=None, ge=0)

    model_config = {"frozen": True}

    def total_locked(self) -> int:
        return sum(entry.amount for acc in self.accounts for entry in acc.queue)


# =============================================================================
# CAPTURE / REBUILD
# =============================================================================


def capture_state(
    state: RegistrarState,
    custody_balance: Optional[int] = None,
    height: Optional[int] = None,
) -> RegistrarStateRecord:
    """Снапшот RegistrarState в запись текущего layout."""
    config = state.config
    accounts = []
    penalties = {}
    for account, account_state in state.iter_accounts():
        accounts.append(
            AccountRecord(
                account=account,
                queue=[LockRecord(**entry.model_dump()) for entry in account_state.queue],
            )
        )
        if account_state.penalty:
            penalties[account] = account_state.penalty

    return RegistrarStateRecord(
        token=config.token,
        operator=config.operator,
        lock_duration=config.lock_duration,
        accounts=accounts,
        lock_size=config.lock_size,
        rate=config.rate,
        penalties=penalties,
        custody_balance=custody_balance,
        captured_at_height=height,
    )


def rebuild_state(record: RegistrarStateRecord) -> RegistrarState:
    """
    Восстановление RegistrarState из записи.

    Raises:
        StateIntegrityError: Дубликат аккаунта, отрицательный penalty или
            сумма очередей != custody_balance записи
    """
    config = GlobalConfig(
        token=record.token,
        operator=record.operator,
        lock_duration=record.lock_duration,
        lock_size=record.lock_size,
        rate=record.rate,
    )
    state = RegistrarState(config=config)

    for account_record in record.accounts:
        if account_record.account in state.accounts:
            raise StateIntegrityError(f"duplicate account {account_record.account!r}")
        queue = LockQueue(
            Lock(amount=entry.amount, maturity_height=entry.maturity_height)
            for entry in account_record.queue
        )
        state.accounts[account_record.account] = AccountState(queue=queue)

    for account, penalty in record.penalties.items():
        if penalty < 0:
            raise StateIntegrityError(f"negative penalty for {account!r}: {penalty}")
        state.account(account).penalty = penalty

    if record.custody_balance is not None:
        total = state.total_locked()
        if total != record.custody_balance:
            raise StateIntegrityError(
                f"conservation violated: locked {total} != custody {record.custody_balance}"
            )

    logger.info(
        "Rebuilt registrar state: layout v%d, %d accounts, %d locked",
        record.layout_version, len(state.accounts), state.total_locked(),
    )
    return state
