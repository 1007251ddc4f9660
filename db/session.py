from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool
from core.config import settings


def build_engine(url: str) -> AsyncEngine:
    """Async engine for PostgreSQL (asyncpg) or, in tests and local runs, SQLite (aiosqlite)."""
    if url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across sessions
        return create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # ProgressService returns snapshots taken before commit; objects stay readable after it
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
