# repositories — доступ к коллекциям MongoDB, по одному классу на сущность.
from portfolio_api.repositories.admins import AdminRepository
from portfolio_api.repositories.experiences import ExperienceRepository
from portfolio_api.repositories.portfolio_content import PortfolioContentRepository
from portfolio_api.repositories.projects import ProjectRepository

__all__ = [
    "AdminRepository",
    "ExperienceRepository",
    "PortfolioContentRepository",
    "ProjectRepository",
]
