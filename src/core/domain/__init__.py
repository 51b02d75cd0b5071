"""
Domain models and value objects.

Contains fundamental registrar entities: Lock, LockQueue, AccountState, GlobalConfig.
"""

from src.core.domain.account_state import AccountState
from src.core.domain.global_config import MUTABLE_FIELDS, GlobalConfig
from src.core.domain.lock import Lock
from src.core.domain.lock_queue import LockQueue
from src.core.domain.registrar_state import RegistrarState
from src.core.domain.units import (
    BASE_UNITS_PER_TOKEN,
    DEFAULT_LOCK_DURATION_BLOCKS,
    DEFAULT_LOCK_SIZE,
    DEFAULT_OPERATOR_ADDRESS,
    DEFAULT_RATE,
    TOKEN_DECIMALS,
    is_non_negative_int,
    is_positive_int,
    maturity_height,
    tokens_to_base_units,
)

__all__ = [
    # Units module
    "TOKEN_DECIMALS",
    "BASE_UNITS_PER_TOKEN",
    "DEFAULT_LOCK_DURATION_BLOCKS",
    "DEFAULT_LOCK_SIZE",
    "DEFAULT_RATE",
    "DEFAULT_OPERATOR_ADDRESS",
    "tokens_to_base_units",
    "maturity_height",
    "is_positive_int",
    "is_non_negative_int",
    # Lock model
    "Lock",
    "LockQueue",
    # Account / config
    "AccountState",
    "RegistrarState",
    "GlobalConfig",
    "MUTABLE_FIELDS",
]
