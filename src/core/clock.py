"""Height clock — внешний монотонный логический источник высоты.

Registrar не производит блоки: высоту поставляет host environment.
ManualHeightClock используется для локальных запусков и тестов.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class HeightClock(Protocol):
    """Источник текущей высоты."""

    def current_height(self) -> int:
        ...


class ManualHeightClock:
    """Высота, которую двигает вызывающий код (аналог mine в dev-сети)."""

    def __init__(self, start_height: int = 0):
        if start_height < 0:
            raise ValueError(f"start_height cannot be negative: {start_height}")
        self._height = start_height

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Сдвинуть высоту вперёд на blocks, вернуть новую высоту."""
        if blocks < 0:
            raise ValueError(f"height is monotonic, cannot advance by {blocks}")
        self._height += blocks
        return self._height

    def advance_to(self, height: int) -> int:
        """Сдвинуть высоту до height (не назад)."""
        if height < self._height:
            raise ValueError(
                f"height is monotonic: {height} < current {self._height}"
            )
        self._height = height
        return self._height
