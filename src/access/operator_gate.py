"""Operator gate — авторизация operator-only операций

Единственная проверка: caller == сохранённый operator (plain equality).
Роль не передаётся через операции registrar; замена operator возможна только
через внешний upgrade boundary.
"""

import logging
from dataclasses import dataclass

from src.core.errors import Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Результат проверки доступа."""

    allowed: bool
    block_reason: str

    caller: str
    operation: str

    details: str


class OperatorGate:
    """Gate для operator-only операций.

    Stateless кроме identity operator, которая фиксирована при создании.
    """

    def __init__(self, operator: str):
        if not operator:
            raise ValueError("operator identity must not be empty")
        self._operator = operator

    @property
    def operator(self) -> str:
        return self._operator

    def evaluate(self, caller: str, operation: str) -> AccessDecision:
        """Оценка доступа caller к operation без исключений."""
        if caller != self._operator:
            return AccessDecision(
                allowed=False,
                block_reason="not_operator",
                caller=caller,
                operation=operation,
                details=f"{operation} is operator-only",
            )

        return AccessDecision(
            allowed=True,
            block_reason="",
            caller=caller,
            operation=operation,
            details=f"PASS: {operation}",
        )

    def require(self, caller: str, operation: str) -> AccessDecision:
        """
        Проверка доступа с исключением.

        Raises:
            Unauthorized: Если caller не operator
        """
        decision = self.evaluate(caller, operation)
        if not decision.allowed:
            logger.warning("Rejected %s from %s: %s", operation, caller, decision.block_reason)
            raise Unauthorized(caller, operation)
        return decision
