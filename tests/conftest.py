"""
Pytest configuration and fixtures for the Bible Quiz backend tests.
"""
import sys
import os
import pytest
import pytest_asyncio

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db.session import build_engine, build_session_factory
from db.seed import create_tables
from models.user import User
from models.level import Level


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite shared by every session of one test"""
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def sample_levels():
    """(id, name, order_number, questions_count)"""
    return [
        (1, "Gênesis", 1, 12),
        (2, "Êxodo", 2, 10),
        (3, "Levítico", 3, 0),
    ]


@pytest_asyncio.fixture
async def seeded(db, sample_levels):
    db.add_all([
        User(id=1, name="Maria", email="maria@example.com", password_hash="x", church="Central"),
        User(id=2, name="João", email="joao@example.com", password_hash="x", church=None),
        User(id=3, name="Ana", email="ana@example.com", password_hash="x", church="Bethel"),
    ])
    db.add_all([
        Level(id=level_id, name=name, order_number=order, questions_count=count)
        for level_id, name, order, count in sample_levels
    ])
    await db.commit()
    return db
