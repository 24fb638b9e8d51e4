"""
softphone/models/common.py — Базовые типы домена.

SoftphoneBase — для локальных моделей и запросов. Пробелы в строках
не обрезаются: пароли extensions передаются в Ringotel как есть.

RemoteBase — для записей Ringotel: неизвестные поля ответа сохраняются,
чтобы при повторной отправке (update) ничего не терялось; ``null`` в
известных полях заменяется значением по умолчанию.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class SoftphoneBase(BaseModel):
    """Базовая Pydantic-модель для локальных схем и запросов."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class RemoteBase(BaseModel):
    """Базовая Pydantic-модель для объектов Ringotel API."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_null_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: v for k, v in data.items()
                if not (v is None and k in cls.model_fields)
            }
        return data
