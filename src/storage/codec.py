"""
State codec — JSON кодирование записи состояния

decode_state:
1. JSON Schema валидация (registrar_state контракт)
2. Проверка layout: версия известна, присутствуют только поля этой версии
3. Pydantic валидация (поля поздних версий получают дефолты)
4. Запись старого layout поднимается до LAYOUT_VERSION
"""

import json
from typing import Any, Dict

from src.core.contracts import validate_registrar_state
from src.core.errors import LayoutIncompatible

from .layout import LAYOUT_VERSION, layout_fields
from .record import RegistrarStateRecord


def encode_state(record: RegistrarStateRecord) -> Dict[str, Any]:
    """Запись → JSON-совместимый dict (None поля опускаются)."""
    data = record.model_dump(mode="json", exclude_none=True)
    validate_registrar_state(data)
    return data


def decode_state(data: Dict[str, Any]) -> RegistrarStateRecord:
    """
    dict → запись с проверкой контракта и layout.

    Raises:
        jsonschema.ValidationError: Данные не соответствуют контракту
        LayoutIncompatible: Неизвестная версия или поле не из layout этой версии
    """
    validate_registrar_state(data)

    version = data["layout_version"]
    allowed = set(layout_fields(version)) | {"layout_version"}
    unexpected = set(data) - allowed
    if unexpected:
        raise LayoutIncompatible(
            f"fields {sorted(unexpected)} are not part of layout v{version}"
        )

    record = RegistrarStateRecord.model_validate(data)
    if record.layout_version != LAYOUT_VERSION:
        # поля поздних версий уже заполнены дефолтами
        record = record.model_copy(update={"layout_version": LAYOUT_VERSION})
    return record


def dumps_state(record: RegistrarStateRecord) -> str:
    """Запись → JSON строка (детерминированный порядок ключей)."""
    return json.dumps(encode_state(record), sort_keys=True)


def loads_state(text: str) -> RegistrarStateRecord:
    """JSON строка → запись."""
    return decode_state(json.loads(text))
