"""ParameterStore — глобальные tunables registrar и per-account penalty."""

from .parameter_store import ParameterStore

__all__ = [
    "ParameterStore",
]
