"""CustodyAdapter — интерфейс внешнего ledger-токена.

Registrar потребляет, но не владеет токеном. Каждый примитив возвращает
True/False; registrar сам превращает False в TransferFailed и откатывает
своё состояние.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CustodyAdapter(Protocol):
    """Pull/push примитивы ledger-токена."""

    @property
    def custody_account(self) -> str:
        """Аккаунт, на котором токен держит средства registrar."""
        ...

    def pull_into(self, from_account: str, amount: int) -> bool:
        """Перевести amount с from_account в custody."""
        ...

    def push_from(self, to_account: str, amount: int) -> bool:
        """Перевести amount из custody на to_account."""
        ...

    def custody_balance(self) -> int:
        """Текущий баланс custody аккаунта."""
        ...
