# schemas — Pydantic-модели для запроса/ответа API. Валидация и сериализация из коробки.
from portfolio_api.schemas.common import ErrorResponse, FieldError, MessageResponse

__all__ = ["ErrorResponse", "FieldError", "MessageResponse"]
