"""Access control — проверка operator для gated операций."""

from .operator_gate import AccessDecision, OperatorGate

__all__ = [
    "OperatorGate",
    "AccessDecision",
]
