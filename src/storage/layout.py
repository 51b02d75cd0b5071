"""Storage layout — append-only история полей сохраняемого состояния.

Каждая версия layout = предыдущая версия + новые поля в конце.
Переупорядочивание, удаление или смена типа существующего поля запрещены:
состояние должно переживать независимые обновления логики вокруг него.
"""

from typing import Final

from src.core.errors import LayoutIncompatible


# (имя поля, тип) в порядке добавления
LAYOUT_HISTORY: Final[dict[int, tuple[tuple[str, str], ...]]] = {
    1: (
        ("token", "address"),
        ("operator", "address"),
        ("lock_duration", "uint"),
        ("accounts", "lock_queues"),
    ),
    2: (
        ("token", "address"),
        ("operator", "address"),
        ("lock_duration", "uint"),
        ("accounts", "lock_queues"),
        ("lock_size", "uint"),
    ),
    3: (
        ("token", "address"),
        ("operator", "address"),
        ("lock_duration", "uint"),
        ("accounts", "lock_queues"),
        ("lock_size", "uint"),
        ("rate", "int"),
        ("penalties", "uint_map"),
        ("custody_balance", "uint"),
        ("captured_at_height", "uint"),
    ),
}

LAYOUT_VERSION: Final[int] = max(LAYOUT_HISTORY)

STORAGE_LAYOUT: Final[tuple[tuple[str, str], ...]] = LAYOUT_HISTORY[LAYOUT_VERSION]


def check_layout_append_only(
    old: tuple[tuple[str, str], ...],
    new: tuple[tuple[str, str], ...],
) -> None:
    """
    Проверка, что new — append-only расширение old.

    Raises:
        LayoutIncompatible: Поле удалено, переставлено или сменило тип
    """
    if len(new) < len(old):
        raise LayoutIncompatible(
            f"layout shrank from {len(old)} to {len(new)} fields"
        )
    for position, (old_field, new_field) in enumerate(zip(old, new)):
        if old_field != new_field:
            raise LayoutIncompatible(
                f"field #{position} changed from {old_field} to {new_field}"
            )


def layout_fields(version: int) -> tuple[str, ...]:
    """
    Имена полей layout версии version.

    Raises:
        LayoutIncompatible: Неизвестная версия (например, запись от более новой логики)
    """
    if version not in LAYOUT_HISTORY:
        raise LayoutIncompatible(
            f"unknown layout version {version} (supported: 1..{LAYOUT_VERSION})"
        )
    return tuple(name for name, _ in LAYOUT_HISTORY[version])


def _check_history() -> None:
    versions = sorted(LAYOUT_HISTORY)
    for previous, current in zip(versions, versions[1:]):
        check_layout_append_only(LAYOUT_HISTORY[previous], LAYOUT_HISTORY[current])


_check_history()
