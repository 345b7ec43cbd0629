"""
Схемы для опыта работы.

current=true и endDate вместе не запрещены: как их показывать, решает фронтенд.
"""
from datetime import datetime

from pydantic import Field

from portfolio_api.schemas.common import CalendarDate, CamelModel


class ExperienceCreate(CamelModel):
    """Создание записи об опыте."""

    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str | None = None
    start_date: CalendarDate
    end_date: CalendarDate | None = None
    current: bool = False
    description: str = Field(min_length=1)
    technologies: list[str] = []


class ExperienceUpdate(CamelModel):
    """Обновление (частичное)."""

    title: str | None = Field(default=None, min_length=1)
    company: str | None = Field(default=None, min_length=1)
    location: str | None = None
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    current: bool | None = None
    description: str | None = Field(default=None, min_length=1)
    technologies: list[str] | None = None


class Experience(ExperienceCreate):
    """Опыт в ответах API."""

    id: str
    created_at: datetime
    updated_at: datetime
