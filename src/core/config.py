"""
Registrar settings — параметры конструирования registrar

Источники:
- dict (from_mapping)
- YAML файл (load_settings)
- переменные окружения (from_env), по образцу deploy-скрипта:
  REGISTRAR_TOKEN_ADDRESS, REGISTRAR_OPERATOR_ADDRESS, REGISTRAR_LOCK_DURATION,
  REGISTRAR_LOCK_SIZE, REGISTRAR_RATE
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from src.core.domain.units import (
    DEFAULT_LOCK_DURATION_BLOCKS,
    DEFAULT_LOCK_SIZE,
    DEFAULT_OPERATOR_ADDRESS,
    DEFAULT_RATE,
    is_positive_int,
)
from src.core.errors import InvalidParameter

logger = logging.getLogger(__name__)


ENV_PREFIX = "REGISTRAR_"

# env var → поле settings
_ENV_FIELDS = {
    "TOKEN_ADDRESS": "token",
    "OPERATOR_ADDRESS": "operator",
    "LOCK_DURATION": "lock_duration",
    "LOCK_SIZE": "lock_size",
    "RATE": "rate",
}

_INT_FIELDS = ("lock_duration", "lock_size", "rate")


@dataclass(frozen=True)
class RegistrarSettings:
    """Параметры конструирования registrar.

    token и operator неизменяемы после создания registrar;
    lock_duration, lock_size, rate — начальные значения tunables.
    """

    token: str = "ledger-token"
    operator: str = DEFAULT_OPERATOR_ADDRESS
    lock_duration: int = DEFAULT_LOCK_DURATION_BLOCKS
    lock_size: int = DEFAULT_LOCK_SIZE
    rate: int = DEFAULT_RATE

    def __post_init__(self):
        if not self.token:
            raise InvalidParameter("token reference must not be empty")
        if not self.operator:
            raise InvalidParameter("operator must not be empty")
        if not is_positive_int(self.lock_duration):
            raise InvalidParameter(
                f"lock_duration must be a positive integer, got {self.lock_duration!r}"
            )
        if not is_positive_int(self.lock_size):
            raise InvalidParameter(
                f"lock_size must be a positive integer, got {self.lock_size!r}"
            )
        if isinstance(self.rate, bool) or not isinstance(self.rate, int):
            raise InvalidParameter(f"rate must be an integer, got {self.rate!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RegistrarSettings":
        """
        Создание settings из dict.

        Неизвестные ключи отклоняются, целочисленные поля принимают int или
        строку с целым числом (например, из YAML/env).

        Raises:
            InvalidParameter: Неизвестный ключ или некорректное значение
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidParameter(f"unknown settings keys: {sorted(unknown)}")

        values = dict(data)
        for name in _INT_FIELDS:
            if name in values:
                values[name] = _parse_int(name, values[name])
        return cls(**values)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["RegistrarSettings"] = None,
    ) -> "RegistrarSettings":
        """
        Settings из переменных окружения поверх base (или дефолтов).

        Args:
            environ: Окружение (default: os.environ)
            base: Базовые settings, которые переопределяются env

        Returns:
            RegistrarSettings
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if base is not None:
            values = {f.name: getattr(base, f.name) for f in fields(base)}

        for suffix, field_name in _ENV_FIELDS.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw != "":
                values[field_name] = raw

        settings = cls.from_mapping(values)
        logger.debug("Settings resolved from environment: operator=%s", settings.operator)
        return settings


def load_settings(path: Path | str) -> RegistrarSettings:
    """
    Загрузка settings из YAML файла.

    Пустой файл → дефолтные settings.

    Raises:
        FileNotFoundError: Если файл не найден
        InvalidParameter: Если содержимое не mapping или значения некорректны
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise InvalidParameter(f"settings file {path} must contain a mapping")

    logger.info("Loaded registrar settings from %s", path)
    return RegistrarSettings.from_mapping(data)


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip().replace("_", ""))
        except ValueError:
            raise InvalidParameter(f"{name} must be an integer, got {value!r}") from None
    raise InvalidParameter(f"{name} must be an integer, got {value!r}")
