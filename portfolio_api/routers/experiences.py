"""
CRUD для опыта работы. Чтение публичное, изменения — только администратор.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status

from portfolio_api.core.database import MongoStore, get_store
from portfolio_api.core.security import Principal, require_admin
from portfolio_api.repositories import ExperienceRepository
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.experience import Experience, ExperienceCreate, ExperienceUpdate

router = APIRouter(prefix="/api/experiences", tags=["experiences"])

NOT_FOUND = {"error": "not_found", "message": "Experience not found"}


def get_repository(store: MongoStore = Depends(get_store)) -> ExperienceRepository:
    return ExperienceRepository(store)


@router.get("", response_model=list[Experience])
def list_experiences(repo: ExperienceRepository = Depends(get_repository)):
    """Весь опыт, по дате начала — свежий первым."""
    return repo.list()


@router.get("/{experience_id}", response_model=Experience, responses={404: {"model": ErrorResponse}})
def get_experience(experience_id: str, repo: ExperienceRepository = Depends(get_repository)):
    experience = repo.get(experience_id)
    if experience is None:
        raise HTTPException(404, detail=NOT_FOUND)
    return experience


@router.post(
    "",
    response_model=Experience,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def create_experience(
    data: ExperienceCreate,
    repo: ExperienceRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    return repo.create(data)


@router.put("/{experience_id}", response_model=Experience, responses={404: {"model": ErrorResponse}})
def update_experience(
    experience_id: str,
    data: ExperienceUpdate,
    repo: ExperienceRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    """Частичное обновление: не переданные поля остаются как были."""
    experience = repo.update(experience_id, data)
    if experience is None:
        raise HTTPException(404, detail=NOT_FOUND)
    return experience


@router.delete("/{experience_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_experience(
    experience_id: str,
    repo: ExperienceRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    repo.delete(experience_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
