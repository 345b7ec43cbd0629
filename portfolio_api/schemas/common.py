"""
Общие схемы ответов API.

Ошибка: { "success": false, "error": "<code>", "message": "<text>" }
Для ошибок валидации дополнительно: "errors": [{ "field", "message" }]
"""
from datetime import date, datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_datetime_adapter = TypeAdapter(datetime)


def _to_calendar_date(value: Any) -> Any:
    """
    Дата-время (объект или ISO-строка вроде 2021-02-28T23:00:00.000Z) -> дата по UTC.

    Наивное время считаем UTC. Строки YYYY-MM-DD и прочее отдаём стандартной проверке date.
    """
    if isinstance(value, str) and len(value) > 10 or isinstance(value, datetime):
        try:
            moment = _datetime_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("Input should be a valid date or datetime") from None
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        return moment.date()
    return value


CalendarDate = Annotated[date, BeforeValidator(_to_calendar_date)]


class CamelModel(BaseModel):
    """База для схем API: в JSON camelCase, в Python snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldError(BaseModel):
    """Ошибка конкретного поля."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Ответ с ошибкой: success=false, error и message."""

    success: bool = False
    error: str = Field(..., description="Код ошибки (например, not_found, validation_error)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    errors: list[FieldError] | None = None


class MessageResponse(BaseModel):
    message: str
