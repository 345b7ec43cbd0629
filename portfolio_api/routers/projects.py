"""
CRUD для проектов. Чтение публичное, изменения — только администратор.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status

from portfolio_api.core.database import MongoStore, get_store
from portfolio_api.core.security import Principal, require_admin
from portfolio_api.repositories import ProjectRepository
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.project import Project, ProjectCreate, ProjectUpdate

router = APIRouter(prefix="/api/projects", tags=["projects"])

NOT_FOUND = {"error": "not_found", "message": "Project not found"}


def get_repository(store: MongoStore = Depends(get_store)) -> ProjectRepository:
    return ProjectRepository(store)


@router.get("", response_model=list[Project])
def list_projects(repo: ProjectRepository = Depends(get_repository)):
    """Все проекты, новые первыми."""
    return repo.list()


@router.get("/{project_id}", response_model=Project, responses={404: {"model": ErrorResponse}})
def get_project(project_id: str, repo: ProjectRepository = Depends(get_repository)):
    project = repo.get(project_id)
    if project is None:
        raise HTTPException(404, detail=NOT_FOUND)
    return project


@router.post(
    "",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def create_project(
    data: ProjectCreate,
    repo: ProjectRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    return repo.create(data)


@router.put("/{project_id}", response_model=Project, responses={404: {"model": ErrorResponse}})
def update_project(
    project_id: str,
    data: ProjectUpdate,
    repo: ProjectRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    """Частичное обновление: не переданные поля остаются как были."""
    project = repo.update(project_id, data)
    if project is None:
        raise HTTPException(404, detail=NOT_FOUND)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_project(
    project_id: str,
    repo: ProjectRepository = Depends(get_repository),
    _: Principal = Depends(require_admin),
):
    repo.delete(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
