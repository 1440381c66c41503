from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.engine import Engine

from jobly.config import get_settings
from jobly.db import Base, get_engine
from jobly.main import app
from jobly.models import CompanyRecord, JobRecord  # noqa: F401
from jobly.services.jobs import Job, JobRepository

USER_TOKEN = "u1-token"
ADMIN_TOKEN = "u2-token"

USER_HEADERS = {"Authorization": f"Bearer {USER_TOKEN}"}
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Engine]:
    sqlite_db_path = tmp_path / "api-tests.db"
    monkeypatch.setenv("API_DATABASE_URL", f"sqlite+pysqlite:///{sqlite_db_path}")
    monkeypatch.setenv("API_DB_ECHO", "false")
    monkeypatch.setenv("API_TOKENS", f"{USER_TOKEN}:u1,{ADMIN_TOKEN}:u2:admin")

    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    with engine.begin() as connection:
        connection.execute(
            text(
                """
                INSERT INTO companies (handle, name, num_employees, description, logo_url)
                VALUES (:handle, :name, :num_employees, :description, :logo_url)
                """
            ),
            [
                {
                    "handle": f"c{index}",
                    "name": f"C{index}",
                    "num_employees": index,
                    "description": f"Desc{index}",
                    "logo_url": f"http://c{index}.img",
                }
                for index in (1, 2, 3)
            ],
        )

    yield engine

    engine.dispose()


@pytest.fixture
def repository(engine: Engine) -> JobRepository:
    return JobRepository(engine)


@pytest.fixture
def seeded_jobs(repository: JobRepository) -> dict[str, Job]:
    rows = [
        {"title": "j1", "salary": 100, "equity": "0.1", "company_handle": "c1"},
        {"title": "j2", "salary": 200, "equity": "0.2", "company_handle": "c2"},
        {"title": "j3", "salary": 300, "equity": None, "company_handle": "c3"},
    ]
    return {row["title"]: repository.create(row) for row in rows}


@pytest.fixture
def client(engine: Engine, seeded_jobs: dict[str, Job]) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client(engine: Engine, seeded_jobs: dict[str, Job]) -> Iterator[TestClient]:
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
