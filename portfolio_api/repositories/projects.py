from pymongo import DESCENDING

from portfolio_api.core.database import PROJECTS
from portfolio_api.repositories.base import DocumentRepository
from portfolio_api.schemas.project import Project


class ProjectRepository(DocumentRepository[Project]):
    """Проекты: новые сверху."""

    collection = PROJECTS
    model = Project
    sort = [("created_at", DESCENDING)]
    nullable_fields = frozenset(
        {"long_description", "github_url", "live_url", "image_url", "start_date", "end_date"}
    )
    date_fields = frozenset({"start_date", "end_date"})
