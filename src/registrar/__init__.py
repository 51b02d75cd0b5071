"""Registrar — lock-queue engine: создание lock, drain созревших lock, фасад.

- LockingService: pull в custody + append в очередь
- UnlockingService: drain с front очереди + push получателю
- Registrar: публичная поверхность с per-account сериализацией
"""

from .locking import LockingService
from .registrar import Registrar
from .unlocking import (
    DrainPlan,
    UnlockingService,
    UnlockResult,
    apply_drain,
    plan_drain,
)

__all__ = [
    "Registrar",
    "LockingService",
    "UnlockingService",
    "UnlockResult",
    "DrainPlan",
    "plan_drain",
    "apply_drain",
]
