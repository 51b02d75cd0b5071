"""
InMemoryCustody — in-process реализация CustodyAdapter

Используется для локальных запусков и тестов вместо реального ledger-токена.
Держит только balance map: allowance и прочий bookkeeping токена вне scope.

Failure injection:
- fail_next_pull() / fail_next_push() — следующий вызов вернёт False
  без изменения балансов
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class InMemoryCustody:
    """Balance map + custody аккаунт."""

    def __init__(self, custody_account: str = "registrar", balances: Optional[dict[str, int]] = None):
        self._custody_account = custody_account
        self._balances: dict[str, int] = dict(balances or {})
        self._lock = threading.Lock()
        self._fail_pulls = 0
        self._fail_pushes = 0

    @property
    def custody_account(self) -> str:
        return self._custody_account

    # =========================================================================
    # LEDGER
    # =========================================================================

    def mint(self, account: str, amount: int) -> None:
        """Начислить amount на account (seed для тестов и симуляций)."""
        if amount < 0:
            raise ValueError(f"mint amount cannot be negative: {amount}")
        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def custody_balance(self) -> int:
        """Баланс custody аккаунта."""
        return self.balance_of(self._custody_account)

    # =========================================================================
    # FAILURE INJECTION
    # =========================================================================

    def fail_next_pull(self, times: int = 1) -> None:
        self._fail_pulls += times

    def fail_next_push(self, times: int = 1) -> None:
        self._fail_pushes += times

    # =========================================================================
    # CUSTODY ADAPTER
    # =========================================================================

    def pull_into(self, from_account: str, amount: int) -> bool:
        """Перевод from_account → custody. False при нехватке баланса."""
        with self._lock:
            if self._fail_pulls:
                self._fail_pulls -= 1
                logger.debug("Injected pull failure for %s", from_account)
                return False
            return self._move(from_account, self._custody_account, amount)

    def push_from(self, to_account: str, amount: int) -> bool:
        """Перевод custody → to_account. False при нехватке custody баланса."""
        with self._lock:
            if self._fail_pushes:
                self._fail_pushes -= 1
                logger.debug("Injected push failure for %s", to_account)
                return False
            return self._move(self._custody_account, to_account, amount)

    def _move(self, source: str, target: str, amount: int) -> bool:
        if amount <= 0:
            return False
        available = self._balances.get(source, 0)
        if available < amount:
            logger.debug("Insufficient balance on %s: %d < %d", source, available, amount)
            return False
        self._balances[source] = available - amount
        self._balances[target] = self._balances.get(target, 0) + amount
        return True
