"""
Lock — Модель одного депозита в очереди аккаунта

Immutable Pydantic модель. Единственное допустимое изменение после создания —
уменьшение amount при частичном unlock, которое создаёт новый экземпляр
с той же maturity_height.
"""

from pydantic import BaseModel, Field


class Lock(BaseModel):
    """
    Депозит в custody с высотой созревания.

    Инварианты:
    - amount > 0 всегда (entry с нулевым amount удаляется из очереди)
    - maturity_height фиксируется при создании как current_height + lock_duration
    """

    amount: int = Field(..., gt=0, description="Количество токенов (base units)")
    maturity_height: int = Field(
        ..., ge=0, description="Абсолютная высота, начиная с которой lock можно снять"
    )

    model_config = {"frozen": True, "strict": True}

    def is_mature(self, current_height: int) -> bool:
        """Lock созрел, если current_height >= maturity_height."""
        return current_height >= self.maturity_height

    def reduced_by(self, amount: int) -> "Lock":
        """
        Новый Lock с amount, уменьшенным на amount.

        Args:
            amount: Снимаемая часть (0 < amount < self.amount)

        Returns:
            Lock с той же maturity_height

        Raises:
            ValueError: Если уменьшение обнулит или сделает amount отрицательным
        """
        if amount <= 0 or amount >= self.amount:
            raise ValueError(
                f"partial reduction {amount} out of range (0, {self.amount})"
            )
        return Lock(amount=self.amount - amount, maturity_height=self.maturity_height)

    def as_pair(self) -> tuple[int, int]:
        """(amount, maturity_height)"""
        return (self.amount, self.maturity_height)
