"""
Схемы для контента секций сайта (hero, about, skills, contact).

У каждой секции своя структура. При записи тело валидируется через
размеченное объединение по имени секции; неизвестная секция — ошибка валидации.
"""
import json
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from portfolio_api.schemas.common import CamelModel


class _SectionContent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class HeroContent(_SectionContent):
    name: str | None = None
    title: str | None = None
    subtitle: str | None = None
    description: str | None = None
    cta_text: str | None = None
    resume_url: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None


class AboutContent(_SectionContent):
    title: str | None = None
    content: str | None = None
    description: str | None = None
    highlights: list[str] | None = None
    skills: list[str] | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None


class SkillCategory(_SectionContent):
    name: str = ""
    skills: list[str] = []


class SkillsContent(_SectionContent):
    title: str | None = None
    categories: list[SkillCategory] = []


class ContactContent(_SectionContent):
    title: str | None = None
    description: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None


class HeroSection(BaseModel):
    section: Literal["hero"]
    content: HeroContent


class AboutSection(BaseModel):
    section: Literal["about"]
    content: AboutContent


class SkillsSection(BaseModel):
    section: Literal["skills"]
    content: SkillsContent


class ContactSection(BaseModel):
    section: Literal["contact"]
    content: ContactContent


SectionPayload = Annotated[
    Union[HeroSection, AboutSection, SkillsSection, ContactSection],
    Field(discriminator="section"),
]

_section_adapter = TypeAdapter(SectionPayload)


def decode_content(raw: Any) -> Any:
    """content, записанный в коллекцию строкой JSON (в обход API), разворачиваем в объект."""
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw


def validate_section_content(section: str, content: Any) -> dict[str, Any]:
    """
    Проверить content по схеме секции и вернуть его в виде для хранения.
    Бросает pydantic.ValidationError.
    """
    payload = _section_adapter.validate_python({"section": section, "content": decode_content(content)})
    return payload.content.model_dump(by_alias=True, exclude_none=True)


class PortfolioContentUpdate(BaseModel):
    """Тело PUT /api/portfolio-content/{section}."""

    content: Any = Field(..., description="Структура зависит от секции")


class PortfolioContent(CamelModel):
    """Секция в ответах API. Для отсутствующей секции — только section и пустой content."""

    id: str | None = None
    section: str
    content: dict[str, Any] = {}
    created_at: datetime | None = None
    updated_at: datetime | None = None
