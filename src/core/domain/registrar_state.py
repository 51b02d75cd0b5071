"""
RegistrarState — полное core-состояние registrar

GlobalConfig + все AccountState. Это единственный объект, который сохраняется
через storage boundary (см. src.storage).
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .account_state import AccountState
from .global_config import GlobalConfig


@dataclass
class RegistrarState:
    """Глобальный конфиг и состояния аккаунтов."""

    config: GlobalConfig
    accounts: dict[str, AccountState] = field(default_factory=dict)

    def account(self, account: str) -> AccountState:
        """AccountState аккаунта, создаётся лениво."""
        return self.accounts.setdefault(account, AccountState())

    def peek_account(self, account: str) -> Optional[AccountState]:
        """AccountState без создания (для read-only операций)."""
        return self.accounts.get(account)

    def iter_accounts(self) -> Iterator[tuple[str, AccountState]]:
        return iter(sorted(self.accounts.items()))

    def total_locked(self) -> int:
        """Сумма amount всех outstanding lock (должна равняться custody balance)."""
        return sum(state.queue.total_amount() for state in self.accounts.values())
