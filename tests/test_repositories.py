import json
from datetime import date

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from portfolio_api.core.database import PORTFOLIO_CONTENT, DataAccessError, MongoStore
from portfolio_api.repositories import (
    AdminRepository,
    ExperienceRepository,
    PortfolioContentRepository,
    ProjectRepository,
)
from portfolio_api.schemas.experience import ExperienceCreate, ExperienceUpdate
from portfolio_api.schemas.project import ProjectCreate, ProjectUpdate


def _project(**overrides) -> ProjectCreate:
    data = {
        "title": "Portfolio",
        "description": "Personal site",
        "long_description": "Built with FastAPI and React",
        "technologies": ["Python", "React", "Python"],
        "github_url": "https://github.com/me/portfolio",
        "live_url": "https://me.dev",
        "start_date": date(2023, 1, 15),
    }
    data.update(overrides)
    return ProjectCreate(**data)


def _experience(**overrides) -> ExperienceCreate:
    data = {
        "title": "Backend Engineer",
        "company": "Acme",
        "start_date": date(2021, 3, 1),
        "description": "APIs",
        "technologies": ["Python"],
    }
    data.update(overrides)
    return ExperienceCreate(**data)


class TestProjectRepository:
    def test_create_then_get_returns_all_fields(self, store, clock):
        repo = ProjectRepository(store, clock)
        created = repo.create(_project())
        fetched = repo.get(created.id)

        assert fetched is not None
        assert fetched.id
        assert fetched.title == "Portfolio"
        assert fetched.long_description == "Built with FastAPI and React"
        assert fetched.technologies == ["Python", "React", "Python"]
        assert fetched.github_url == "https://github.com/me/portfolio"
        assert fetched.live_url == "https://me.dev"
        assert fetched.start_date == date(2023, 1, 15)
        assert fetched.end_date is None
        assert fetched.featured is False
        assert fetched.active is True
        assert fetched.created_at is not None
        assert fetched.created_at == fetched.updated_at

    def test_partial_update_keeps_other_fields(self, store, clock):
        repo = ProjectRepository(store, clock)
        created = repo.create(_project())
        updated = repo.update(created.id, ProjectUpdate(title="Renamed"))

        assert updated.title == "Renamed"
        assert updated.description == created.description
        assert updated.technologies == created.technologies
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    def test_empty_update_still_advances_timestamp(self, store, clock):
        repo = ProjectRepository(store, clock)
        created = repo.create(_project())
        updated = repo.update(created.id, ProjectUpdate())
        assert updated.updated_at > created.updated_at
        assert updated.title == created.title

    def test_explicit_null_clears_optional_field_only(self, store, clock):
        repo = ProjectRepository(store, clock)
        created = repo.create(_project())
        updated = repo.update(
            created.id,
            ProjectUpdate.model_validate({"longDescription": None, "title": None}),
        )
        assert updated.long_description is None
        assert updated.title == "Portfolio"

    def test_update_unknown_id_returns_none(self, store, clock):
        repo = ProjectRepository(store, clock)
        assert repo.update("65f0c0ffee0000000000abcd", ProjectUpdate(title="x")) is None
        assert repo.update("not-an-id", ProjectUpdate(title="x")) is None

    def test_delete_then_get_is_none_and_delete_is_idempotent(self, store, clock):
        repo = ProjectRepository(store, clock)
        created = repo.create(_project())
        repo.delete(created.id)
        assert repo.get(created.id) is None
        repo.delete(created.id)
        repo.delete("not-an-id")

    def test_list_newest_first(self, store, clock):
        repo = ProjectRepository(store, clock)
        for title in ("first", "second", "third"):
            repo.create(_project(title=title))
        assert [p.title for p in repo.list()] == ["third", "second", "first"]


class TestExperienceRepository:
    def test_list_sorted_by_start_date_desc(self, store, clock):
        repo = ExperienceRepository(store, clock)
        repo.create(_experience(company="Old", start_date=date(2018, 1, 1)))
        repo.create(_experience(company="New", start_date=date(2022, 6, 1), current=True))
        repo.create(_experience(company="Mid", start_date=date(2020, 1, 1), end_date=date(2022, 5, 1)))

        assert [e.company for e in repo.list()] == ["New", "Mid", "Old"]

    def test_dates_round_trip_as_dates(self, store, clock):
        repo = ExperienceRepository(store, clock)
        created = repo.create(_experience(end_date=date(2023, 12, 31)))
        fetched = repo.get(created.id)
        assert fetched.start_date == date(2021, 3, 1)
        assert fetched.end_date == date(2023, 12, 31)

    def test_current_with_end_date_is_stored_as_is(self, store, clock):
        repo = ExperienceRepository(store, clock)
        created = repo.create(_experience(current=True, end_date=date(2024, 1, 1)))
        assert created.current is True
        assert created.end_date == date(2024, 1, 1)

    def test_partial_update(self, store, clock):
        repo = ExperienceRepository(store, clock)
        created = repo.create(_experience())
        updated = repo.update(created.id, ExperienceUpdate(location="Remote"))
        assert updated.location == "Remote"
        assert updated.company == "Acme"
        assert updated.updated_at > created.updated_at


class TestPortfolioContentRepository:
    def test_upsert_creates_then_overwrites(self, store, clock):
        repo = PortfolioContentRepository(store, clock)
        first = repo.upsert("hero", {"title": "Hi"})
        second = repo.upsert("hero", {"title": "Hello"})

        assert second.id == first.id
        assert second.content == {"title": "Hello"}
        assert second.created_at == first.created_at
        assert second.updated_at > first.updated_at
        assert len(repo.list()) == 1

    def test_repeated_upsert_stores_same_content(self, store, clock):
        repo = PortfolioContentRepository(store, clock)
        repo.upsert("hero", {"title": "Hi"})
        repo.upsert("hero", {"title": "Hi"})
        assert repo.get("hero").content == {"title": "Hi"}

    def test_missing_section_is_none(self, store, clock):
        assert PortfolioContentRepository(store, clock).get("nope") is None

    def test_sections_live_in_portfolio_content_collection(self, store, clock):
        PortfolioContentRepository(store, clock).upsert("hero", {"title": "Hi"})
        assert store.find_one("portfolio-content", {"section": "hero"})["content"] == {"title": "Hi"}
        assert "portfolio_content" not in store.db.list_collection_names()

    def test_json_text_content_is_decoded(self, store, clock):
        store.insert_one(PORTFOLIO_CONTENT, {"section": "about", "content": json.dumps({"title": "About Me"})})
        assert PortfolioContentRepository(store, clock).get("about").content == {"title": "About Me"}

    def test_unreadable_text_content_served_empty(self, store, clock):
        store.insert_one(PORTFOLIO_CONTENT, {"section": "about", "content": "{broken"})
        assert PortfolioContentRepository(store, clock).get("about").content == {}


class TestAdminRepository:
    def test_create_and_lookup(self, store, clock):
        repo = AdminRepository(store, clock)
        admin = repo.create("admin", "hash", must_change_password=True)
        assert repo.get(admin.id).username == "admin"
        assert repo.get_by_username("admin").id == admin.id
        assert repo.get_by_username("ghost") is None

    def test_set_password_clears_rotation_flag(self, store, clock):
        repo = AdminRepository(store, clock)
        admin = repo.create("admin", "old-hash", must_change_password=True)
        updated = repo.set_password(admin.id, "new-hash")
        assert updated.password_hash == "new-hash"
        assert updated.must_change_password is False
        assert updated.updated_at > admin.updated_at

    def test_record_login(self, store, clock):
        repo = AdminRepository(store, clock)
        admin = repo.create("admin", "hash")
        assert admin.last_login is None
        repo.record_login(admin.id)
        assert repo.get(admin.id).last_login is not None

    def test_delete_then_get_is_none(self, store, clock):
        repo = AdminRepository(store, clock)
        admin = repo.create("admin", "hash")
        repo.delete(admin.id)
        assert repo.get(admin.id) is None


class _UnreachableCollection:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("no servers available")

        return fail


class TestMongoStoreErrors:
    def test_driver_errors_become_data_access_error(self, monkeypatch):
        store = MongoStore(db_name="x")
        monkeypatch.setattr(store, "collection", lambda name: _UnreachableCollection())
        with pytest.raises(DataAccessError):
            store.find_one("projects", {})
        with pytest.raises(DataAccessError):
            store.insert_one("projects", {"title": "x"})
        with pytest.raises(DataAccessError):
            store.delete_one("projects", {})
