"""Root conftest — shared test configuration."""

import asyncio
import os
import tempfile

# Ensure tests never touch a real database or the working directory.
# The module-level app is never started, so UPLOAD_DIR is never created.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault(
    "UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "portfolio-uploads-unused")
)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import Settings
from app.core.database import Base
from app.main import create_app


async def _create_schema(database_url: str) -> None:
    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(tmp_path, upload_dir) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'portfolio.db'}",
        UPLOAD_DIR=str(upload_dir),
    )


@pytest.fixture
def test_app(test_settings):
    asyncio.run(_create_schema(test_settings.DATABASE_URL))
    return create_app(test_settings)


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as test_client:
        yield test_client
