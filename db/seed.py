from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy import select, func
from models.base import Base
from models.user import User  # noqa: F401 - register tables
from models.level import Level, Question
from models.progress import UserProgress, QuizAttempt, UserAnswer  # noqa: F401
from models.ranking import Ranking  # noqa: F401
from models.achievement import Achievement, UserAchievement  # noqa: F401
from core.config import settings
from core.logger import logger

BIBLE_BOOK_LEVELS = [
    "Gênesis", "Êxodo", "Levítico", "Números", "Deuteronômio", "Josué",
    "Juízes", "Rute", "1 Samuel", "2 Samuel", "1 Reis", "2 Reis",
]

ACHIEVEMENTS = [
    ("Iniciante", "Completou 10 fases", "completed_levels", 10),
    ("Estudioso", "Completou 50 fases", "completed_levels", 50),
    ("Mestre Bíblico", "Completou 100 fases", "completed_levels", 100),
    ("Perfeição", "Conseguiu 3 estrelas em 10 fases", "three_stars", 10),
    ("Velocista", "Completou uma fase em menos de 1 minuto", "fast_completion", 60),
    ("Dedicado", "Jogou por 7 dias consecutivos", "consecutive_days", 7),
]

# (question, a, b, c, d, correct) for the first level
GENESIS_QUESTIONS = [
    ("Quem foi o primeiro homem criado por Deus?", "Noé", "Adão", "Abraão", "Moisés", "B"),
    ("Quantos dias Deus levou para criar o mundo segundo Gênesis?", "3 dias", "6 dias", "7 dias", "40 dias", "B"),
    ("Quem construiu a arca?", "Abraão", "Moisés", "Noé", "Davi", "C"),
]


async def create_tables(engine: AsyncEngine):
    logger.info("Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("All tables created", tables=sorted(Base.metadata.tables))


async def initialize_basic_data(session: AsyncSession) -> bool:
    """Insert levels, achievements and sample questions. Returns False if already seeded."""
    existing = (await session.execute(select(func.count(Level.id)))).scalar()
    if existing:
        logger.info("Levels already present, skipping seed", levels=existing)
        return False

    levels = [
        Level(
            name=name,
            description=f"Perguntas sobre o livro de {name}",
            order_number=order,
            questions_count=settings.DEFAULT_QUESTIONS_COUNT
        )
        for order, name in enumerate(BIBLE_BOOK_LEVELS, 1)
    ]
    session.add_all(levels)
    await session.flush()

    session.add_all([
        Achievement(name=name, description=description, requirement_type=req_type, requirement_value=value)
        for name, description, req_type, value in ACHIEVEMENTS
    ])

    session.add_all([
        Question(
            level_id=levels[0].id,
            question_text=text,
            option_a=a,
            option_b=b,
            option_c=c,
            option_d=d,
            correct_answer=correct
        )
        for text, a, b, c, d, correct in GENESIS_QUESTIONS
    ])

    await session.commit()
    logger.info(
        "Basic data initialized",
        levels=len(levels),
        achievements=len(ACHIEVEMENTS),
        questions=len(GENESIS_QUESTIONS)
    )
    return True
