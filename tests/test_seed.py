import pytest
from sqlalchemy import select, func

from db.seed import initialize_basic_data, BIBLE_BOOK_LEVELS
from models.level import Level, Question
from models.achievement import Achievement
from models.ranking import Ranking


@pytest.mark.asyncio
async def test_seed_inserts_levels_achievements_and_questions(db):
    assert await initialize_basic_data(db) is True

    levels = (await db.execute(select(Level).order_by(Level.order_number))).scalars().all()
    assert [level.name for level in levels] == BIBLE_BOOK_LEVELS
    assert all(level.questions_count == 12 for level in levels)
    assert levels[0].description == "Perguntas sobre o livro de Gênesis"

    assert (await db.execute(select(func.count(Achievement.id)))).scalar() == 6
    questions = (await db.execute(select(Question))).scalars().all()
    assert len(questions) == 3
    assert {q.level_id for q in questions} == {levels[0].id}

    # Rankings fill up only as users play
    assert (await db.execute(select(func.count(Ranking.id)))).scalar() == 0


@pytest.mark.asyncio
async def test_seed_is_skipped_when_levels_exist(db):
    await initialize_basic_data(db)

    assert await initialize_basic_data(db) is False
    assert (await db.execute(select(func.count(Level.id)))).scalar() == len(BIBLE_BOOK_LEVELS)
