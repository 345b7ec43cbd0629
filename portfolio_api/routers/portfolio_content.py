"""
Контент секций сайта (hero, about, skills, contact).

GET отдаёт секцию или пустую заготовку {section, content: {}}, если её ещё не заполняли.
PUT — upsert по имени секции; content проверяется по схеме этой секции.
"""
from fastapi import APIRouter, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from portfolio_api.core.database import MongoStore, get_store
from portfolio_api.core.security import Principal, require_admin
from portfolio_api.repositories import PortfolioContentRepository
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.portfolio_content import (
    PortfolioContent,
    PortfolioContentUpdate,
    validate_section_content,
)

router = APIRouter(prefix="/api/portfolio-content", tags=["portfolio-content"])


def get_repository(store: MongoStore = Depends(get_store)) -> PortfolioContentRepository:
    return PortfolioContentRepository(store)


@router.get("", response_model=list[PortfolioContent])
def list_sections(repo: PortfolioContentRepository = Depends(get_repository)):
    return repo.list()


@router.get("/{section}", response_model=PortfolioContent, response_model_exclude_none=True)
def get_section(section: str, repo: PortfolioContentRepository = Depends(get_repository)):
    return repo.get(section) or PortfolioContent(section=section, content={})


@router.put("/{section}", response_model=PortfolioContent, responses={400: {"model": ErrorResponse}})
def update_section(
    section: str,
    data: PortfolioContentUpdate,
    repo: PortfolioContentRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    try:
        content = validate_section_content(section, data.content)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
    return repo.upsert(section, content)
