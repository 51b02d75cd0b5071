"""
Contract Validation Module

Модуль для валидации JSON контрактов registrar.
"""

from .validators import (
    RegistrarStateValidator,
    SchemaLoader,
    validate_registrar_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "RegistrarStateValidator",
    # Functions
    "validate_registrar_state",
]
