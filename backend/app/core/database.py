"""
Async database engine, session factory, and ORM base.

Rules enforced:
  • Every DB call goes through AsyncSession.
  • One Database per application, created by create_app() and kept on
    app.state — no engine is built as an import side effect.
  • Sessions are request-scoped via FastAPI's Depends(get_db_session).
  • The declarative Base is shared across all models so Alembic can
    auto-detect schema changes from a single metadata object.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


# ── ORM Base ────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Shared declarative base for all SQLAlchemy models."""


# ── Engine + session factory ────────────────────────────────
class Database:
    """Process-scoped connection pool and session factory."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        # pool_pre_ping: drop stale connections before reuse
        # echo: SQL logging — only in debug mode
        self.engine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # avoid lazy-load issues after commit
        )

    async def ping(self) -> None:
        """Round-trip a trivial query; raises if the store is unreachable."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


# ── Dependency ──────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a scoped async session for one request.

    The session is committed by the caller (router);
    this generator only guarantees cleanup on exit.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
