"""
Схемы для проектов.

ProjectCreate — тело POST, ProjectUpdate — тело PUT (частичное), Project — ответ с id.
"""
from datetime import datetime

from pydantic import Field

from portfolio_api.schemas.common import CalendarDate, CamelModel


class ProjectCreate(CamelModel):
    """Создание проекта."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    long_description: str | None = None
    technologies: list[str] = Field(min_length=1)
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    featured: bool = False
    active: bool = True


class ProjectUpdate(CamelModel):
    """Обновление проекта (частичное). Не переданные поля не трогаем."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    long_description: str | None = None
    technologies: list[str] | None = Field(default=None, min_length=1)
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    featured: bool | None = None
    active: bool | None = None


class Project(ProjectCreate):
    """Проект в ответах API."""

    id: str
    created_at: datetime
    updated_at: datetime
