"""
Units — единицы токена и высоты, дефолтные параметры registrar

Все amounts — целые числа в base units токена (10**TOKEN_DECIMALS за 1 токен).
Все heights и durations — целые числа в единицах логических часов (blocks).

ЗАПРЕЩЕНО использовать float в value path: только int и конвертеры из этого модуля.
"""

from typing import Final


# =============================================================================
# ТОКЕН
# =============================================================================
# Десятичные знаки ledger-токена
TOKEN_DECIMALS: Final[int] = 18

# Base units в одном целом токене
BASE_UNITS_PER_TOKEN: Final[int] = 10**TOKEN_DECIMALS


# =============================================================================
# ДЕФОЛТНЫЕ ПАРАМЕТРЫ
# =============================================================================
# 12s на блок → 5 блоков в минуту, 180 дней
DEFAULT_LOCK_DURATION_BLOCKS: Final[int] = 5 * 60 * 24 * 180

# Фиксированный размер lock для amount-less варианта (100 токенов)
DEFAULT_LOCK_SIZE: Final[int] = 100 * BASE_UNITS_PER_TOKEN

DEFAULT_RATE: Final[int] = 0

# Hardhat account #3, fallback operator локального деплоя
DEFAULT_OPERATOR_ADDRESS: Final[str] = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def tokens_to_base_units(tokens: int) -> int:
    """
    Конверсия: целые токены → base units

    Args:
        tokens: Количество целых токенов

    Returns:
        tokens * 10**TOKEN_DECIMALS
    """
    return tokens * BASE_UNITS_PER_TOKEN


def maturity_height(current_height: int, lock_duration: int) -> int:
    """Высота созревания lock: фиксируется в момент создания."""
    return current_height + lock_duration


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_positive_int(value: object) -> bool:
    """True для int > 0 (bool не считается int)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_non_negative_int(value: object) -> bool:
    """True для int >= 0 (bool не считается int)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
