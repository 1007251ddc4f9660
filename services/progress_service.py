import math
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import DBAPIError
from models.level import Level
from models.user import User
from models.progress import UserProgress, QuizAttempt, UserAnswer
from models.ranking import Ranking
from schemas.progress import AttemptResult, ProgressOutcome, ProgressRead, RankingRead
from core.exceptions import NotFoundError, InvalidInputError, ConflictError
from core.config import settings
from core.logger import logger

# (minimum completion percentage, stars), evaluated highest first
STAR_THRESHOLDS = ((90, 3), (70, 2), (50, 1))

# serialization_failure, deadlock_detected, unique_violation
CONFLICT_SQLSTATES = {"40001", "40P01", "23505"}


def completion_percentage(correct_answers: int, questions_count: int) -> float:
    if not questions_count:
        return 0.0
    return correct_answers / questions_count * 100


def compute_stars(correct_answers: int, questions_count: int) -> int:
    """Map the share of correct answers to a 0-3 star rating."""
    if not questions_count:
        return 0
    # Integer comparison keeps exact thresholds (e.g. 9/10 == 90%) free of float error
    for threshold, stars in STAR_THRESHOLDS:
        if correct_answers * 100 >= threshold * questions_count:
            return stars
    return 0


def is_conflict_error(exc: DBAPIError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in CONFLICT_SQLSTATES:
        return True
    # SQLite only reports the racing insert through its message
    return "UNIQUE constraint failed" in str(orig)


class ProgressService:
    """
    Records finished quiz attempts.

    Each call upserts the (user, level) progress row, appends the attempt to
    history and rebuilds the user's ranking row from scratch, all inside one
    transaction on the caller's session.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_attempt(self, result: AttemptResult) -> ProgressOutcome:
        self._validate(result)

        retries = max(0, settings.ATTEMPT_RETRIES)
        for attempt in range(retries + 1):
            try:
                outcome = await self._apply(result)
                await self.db.commit()
            except DBAPIError as e:
                await self.db.rollback()
                if not is_conflict_error(e):
                    raise
                if attempt >= retries:
                    logger.error("Progress update conflict not resolved", user_id=result.user_id, level_id=result.level_id)
                    raise ConflictError(
                        f"Concurrent update for user {result.user_id} kept conflicting"
                    ) from e
                logger.warning("Progress update conflicted, retrying", user_id=result.user_id, level_id=result.level_id, attempt=attempt + 1)
                continue
            except BaseException:
                # Flushed progress or attempt rows must not outlive a failed call
                await self.db.rollback()
                raise

            logger.info(
                "Attempt recorded",
                user_id=result.user_id,
                level_id=result.level_id,
                stars=outcome.progress.stars,
                score=outcome.ranking.score
            )
            return outcome

    async def recompute_ranking(self, user_id: int) -> RankingRead:
        """Rebuild a user's ranking row from progress and attempt history."""
        try:
            await self._lock_user(user_id)
            ranking = await self._write_ranking(user_id, datetime.utcnow())
            snapshot = RankingRead.model_validate(ranking)
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise
        logger.info("Ranking recomputed", user_id=user_id, score=snapshot.score)
        return snapshot

    def _validate(self, result: AttemptResult):
        for field in ("elapsed_seconds", "correct_answers", "incorrect_answers"):
            if getattr(result, field) < 0:
                raise InvalidInputError(f"{field} must not be negative")
        for answer in result.answers:
            if answer.time_taken_seconds is not None and answer.time_taken_seconds < 0:
                raise InvalidInputError("time_taken_seconds must not be negative")

    async def _apply(self, result: AttemptResult) -> ProgressOutcome:
        level = (await self.db.execute(select(Level).filter(Level.id == result.level_id))).scalar_one_or_none()
        if not level:
            raise NotFoundError(f"Level {result.level_id} not found")

        # Serializes concurrent attempts of the same user
        await self._lock_user(result.user_id)

        now = datetime.utcnow()
        stars = compute_stars(result.correct_answers, level.questions_count)
        logger.debug(
            "Stars computed",
            user_id=result.user_id,
            level_id=result.level_id,
            percentage=round(completion_percentage(result.correct_answers, level.questions_count), 1),
            stars=stars
        )

        progress = await self._upsert_progress(result, stars, now)
        await self._append_attempt(result, stars, now)
        ranking = await self._write_ranking(result.user_id, now)

        return ProgressOutcome(
            progress=ProgressRead.model_validate(progress),
            ranking=RankingRead.model_validate(ranking),
        )

    async def _lock_user(self, user_id: int):
        result = await self.db.execute(
            select(User.id).filter(User.id == user_id).with_for_update()
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f"User {user_id} not found")

    async def _upsert_progress(self, result: AttemptResult, stars: int, now: datetime) -> UserProgress:
        query = select(UserProgress).filter(
            UserProgress.user_id == result.user_id,
            UserProgress.level_id == result.level_id
        )
        progress = (await self.db.execute(query)).scalar_one_or_none()

        if not progress:
            progress = UserProgress(
                user_id=result.user_id,
                level_id=result.level_id,
                is_completed=True,
                stars=stars,
                best_time_seconds=result.elapsed_seconds,
                last_played=now
            )
            self.db.add(progress)
        else:
            progress.is_completed = True
            progress.stars = max(progress.stars or 0, stars)
            if progress.best_time_seconds is None or result.elapsed_seconds < progress.best_time_seconds:
                progress.best_time_seconds = result.elapsed_seconds
            progress.last_played = now

        await self.db.flush()
        return progress

    async def _append_attempt(self, result: AttemptResult, stars: int, now: datetime) -> QuizAttempt:
        attempt = QuizAttempt(
            user_id=result.user_id,
            level_id=result.level_id,
            started_at=now - timedelta(seconds=result.elapsed_seconds),
            completed_at=now,
            time_elapsed_seconds=result.elapsed_seconds,
            correct_answers=result.correct_answers,
            incorrect_answers=result.incorrect_answers,
            stars_earned=stars
        )
        self.db.add(attempt)
        await self.db.flush()

        for answer in result.answers:
            self.db.add(UserAnswer(
                attempt_id=attempt.id,
                question_id=answer.question_id,
                user_answer=answer.user_answer,
                is_correct=answer.is_correct,
                time_taken_seconds=answer.time_taken_seconds
            ))
        if result.answers:
            await self.db.flush()
        return attempt

    async def _write_ranking(self, user_id: int, now: datetime) -> Ranking:
        completed_levels = (await self.db.execute(
            select(func.count(UserProgress.id)).filter(
                UserProgress.user_id == user_id,
                UserProgress.is_completed == True
            )
        )).scalar() or 0

        total_stars = (await self.db.execute(
            select(func.coalesce(func.sum(UserProgress.stars), 0)).filter(UserProgress.user_id == user_id)
        )).scalar() or 0

        # Answer totals cover every attempt; the average only completed ones
        totals = (await self.db.execute(
            select(
                func.coalesce(func.sum(QuizAttempt.correct_answers), 0),
                func.coalesce(func.sum(QuizAttempt.incorrect_answers), 0)
            ).filter(QuizAttempt.user_id == user_id)
        )).one()

        avg_time = (await self.db.execute(
            select(func.avg(QuizAttempt.time_elapsed_seconds)).filter(
                QuizAttempt.user_id == user_id,
                QuizAttempt.completed_at.isnot(None)
            )
        )).scalar()

        score = (
            completed_levels * settings.POINTS_PER_COMPLETED_LEVEL
            + int(total_stars) * settings.POINTS_PER_STAR
        )

        ranking = (await self.db.execute(
            select(Ranking).filter(Ranking.user_id == user_id)
        )).scalar_one_or_none()
        if not ranking:
            ranking = Ranking(user_id=user_id)
            self.db.add(ranking)

        ranking.score = score
        ranking.completed_levels = completed_levels
        ranking.correct_answers = int(totals[0])
        ranking.incorrect_answers = int(totals[1])
        ranking.average_time_seconds = math.floor(float(avg_time) + 0.5) if avg_time is not None else None
        ranking.last_updated = now

        await self.db.flush()
        return ranking
