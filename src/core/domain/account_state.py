"""
AccountState — состояние аккаунта в registrar

Создаётся лениво при первом lock (или set_penalty) и никогда не удаляется:
пустая очередь — валидное переиспользуемое состояние.
"""

from dataclasses import dataclass, field

from .lock_queue import LockQueue


@dataclass
class AccountState:
    """Очередь lock + penalty аккаунта.

    penalty хранится и читается, но ни одна операция unlock его не потребляет.
    """

    queue: LockQueue = field(default_factory=LockQueue)
    penalty: int = 0
