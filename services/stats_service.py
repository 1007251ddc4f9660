from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from models.ranking import Ranking
from models.user import User
from models.level import Level
from models.progress import UserProgress, QuizAttempt, UserAnswer
from core.config import settings

class StatsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_leaderboard(self, limit: Optional[int] = None) -> List[dict]:
        """
        Get the global ranking board.
        Rankings are written by ProgressService, so this is a plain read ordered by score.
        """
        query = (
            select(Ranking, User.name, User.church)
            .join(User, User.id == Ranking.user_id)
            .order_by(desc(Ranking.score), Ranking.user_id.asc())
            .limit(settings.LEADERBOARD_LIMIT if limit is None else limit)
        )
        result = await self.db.execute(query)
        rows = result.all()

        return [self._ranking_row(i, row.Ranking, row.name, row.church) for i, row in enumerate(rows, 1)]

    async def get_user_rank(self, user_id: int) -> Optional[dict]:
        """Get a user's rank and ranking row; None before their first attempt"""
        result = await self.db.execute(
            select(Ranking, User.name, User.church)
            .join(User, User.id == Ranking.user_id)
            .filter(Ranking.user_id == user_id)
        )
        row = result.one_or_none()
        if not row:
            return None

        # Count those strictly greater
        rank_q = select(func.count(Ranking.id)).filter(Ranking.score > row.Ranking.score)
        rank_val = (await self.db.execute(rank_q)).scalar() + 1

        return self._ranking_row(rank_val, row.Ranking, row.name, row.church)

    async def get_user_progress(self, user_id: int) -> List[dict]:
        """Per-level progress with answer counts from the answer log, in level order"""
        answers_q = (
            select(
                QuizAttempt.level_id,
                func.count(UserAnswer.id).filter(UserAnswer.is_correct == True).label("correct_count"),
                func.count(UserAnswer.id).filter(UserAnswer.is_correct == False).label("error_count")
            )
            .join(UserAnswer, UserAnswer.attempt_id == QuizAttempt.id)
            .filter(QuizAttempt.user_id == user_id)
            .group_by(QuizAttempt.level_id)
            .alias("a_stats")
        )

        query = (
            select(
                UserProgress,
                Level.name,
                Level.order_number,
                answers_q.c.correct_count,
                answers_q.c.error_count
            )
            .join(Level, Level.id == UserProgress.level_id)
            .outerjoin(answers_q, answers_q.c.level_id == UserProgress.level_id)
            .filter(UserProgress.user_id == user_id)
            .order_by(Level.order_number.asc())
        )

        result = await self.db.execute(query)
        rows = result.all()

        return [{
            "level_id": row.UserProgress.level_id,
            "level_name": row.name,
            "order_number": row.order_number,
            "is_completed": row.UserProgress.is_completed,
            "stars": row.UserProgress.stars,
            "best_time_seconds": row.UserProgress.best_time_seconds,
            "last_played": row.UserProgress.last_played,
            "correct_answers": int(row.correct_count or 0),
            "incorrect_answers": int(row.error_count or 0)
        } for row in rows]

    @staticmethod
    def _ranking_row(rank: int, ranking: Ranking, name: str, church: Optional[str]) -> dict:
        return {
            "rank": rank,
            "user_id": ranking.user_id,
            "name": name or f"User {ranking.user_id}",
            "church": church,
            "score": ranking.score,
            "completed_levels": ranking.completed_levels,
            "correct_answers": ranking.correct_answers,
            "incorrect_answers": ranking.incorrect_answers,
            "average_time_seconds": ranking.average_time_seconds
        }
