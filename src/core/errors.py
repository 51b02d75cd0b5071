"""
Ошибки registrar — таксономия отказов операций.

Все ошибки ожидаемые (caller-facing): они возникают из-за времени (height),
авторизации или отказа внешнего custody. Любая ошибка прерывает операцию
без частичного изменения состояния.
"""


class RegistrarError(Exception):
    """Базовая ошибка registrar."""


class InvalidParameter(RegistrarError, ValueError):
    """Недопустимое значение параметра (нулевая длительность/размер, amount <= 0)."""


class Unauthorized(RegistrarError, PermissionError):
    """Вызов operator-only операции не от operator."""

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(f"{operation}: caller {caller!r} is not the operator")


class NothingUnlockable(RegistrarError):
    """Очередь пуста или front entry ещё не созрел."""

    def __init__(self, account: str, current_height: int):
        self.account = account
        self.current_height = current_height
        super().__init__(
            f"no unlockables found for {account!r} at height {current_height}"
        )


class TransferFailed(RegistrarError):
    """Внешний custody transfer (pull/push) не прошёл."""

    def __init__(self, direction: str, account: str, amount: int):
        self.direction = direction
        self.account = account
        self.amount = amount
        super().__init__(f"custody {direction} of {amount} for {account!r} failed")


class LayoutIncompatible(RegistrarError):
    """Новый storage layout не является append-only расширением старого."""


class StateIntegrityError(RegistrarError):
    """Восстановленное состояние нарушает conservation или ordering."""
