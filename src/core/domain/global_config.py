"""
GlobalConfig — Глобальные параметры registrar

Immutable Pydantic модель. Изменение параметра = замена всего снапшота
через model_copy(update=...), поэтому setter либо меняет одно поле целиком,
либо не меняет ничего.

Мутабельны только lock_duration, lock_size, rate (и только через operator).
token и operator фиксируются при создании.
"""

from pydantic import BaseModel, Field

from .units import DEFAULT_LOCK_DURATION_BLOCKS, DEFAULT_LOCK_SIZE, DEFAULT_RATE


# Поля, которые разрешено менять после конструирования
MUTABLE_FIELDS = frozenset({"lock_duration", "lock_size", "rate"})


class GlobalConfig(BaseModel):
    """
    Снапшот глобальных параметров.

    Все значения — int (strict mode, float и bool отклоняются).
    """

    # Идентичность (immutable)
    token: str = Field(..., min_length=1, description="Ссылка на ledger-токен")
    operator: str = Field(..., min_length=1, description="Единственный operator")

    # Tunables
    lock_duration: int = Field(
        default=DEFAULT_LOCK_DURATION_BLOCKS,
        gt=0,
        description="Длительность lock в blocks (для будущих lock)",
    )
    lock_size: int = Field(
        default=DEFAULT_LOCK_SIZE,
        gt=0,
        description="Фиксированный amount для amount-less lock (base units)",
    )
    rate: int = Field(
        default=DEFAULT_RATE,
        description="Публикуемый reward rate (внутри registrar не используется)",
    )

    model_config = {"frozen": True, "strict": True}

    def with_value(self, field_name: str, value: int) -> "GlobalConfig":
        """
        Новый снапшот с заменённым tunable полем.

        Значение проходит ту же валидацию, что и при создании.

        Raises:
            KeyError: Если поле не входит в MUTABLE_FIELDS
            pydantic.ValidationError: Если значение нарушает constraints поля
        """
        if field_name not in MUTABLE_FIELDS:
            raise KeyError(f"{field_name} is not a mutable config field")
        return GlobalConfig.model_validate({**self.model_dump(), field_name: value})
