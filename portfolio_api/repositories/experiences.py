from pymongo import DESCENDING

from portfolio_api.core.database import EXPERIENCES
from portfolio_api.repositories.base import DocumentRepository
from portfolio_api.schemas.experience import Experience


class ExperienceRepository(DocumentRepository[Experience]):
    """Опыт работы: по дате начала, свежие сверху."""

    collection = EXPERIENCES
    model = Experience
    sort = [("start_date", DESCENDING)]
    nullable_fields = frozenset({"location", "end_date"})
    date_fields = frozenset({"start_date", "end_date"})
