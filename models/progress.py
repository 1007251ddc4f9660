from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from models.base import Base

class UserProgress(Base):
    """Best-ever outcome per (user, level)."""
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "level_id", name="uq_user_progress_user_level"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    level_id = Column(Integer, ForeignKey("levels.id"), nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    stars = Column(Integer, default=0, nullable=False)
    best_time_seconds = Column(Integer, nullable=True)
    last_played = Column(DateTime, nullable=True)

class QuizAttempt(Base):
    """Append-only history of completed runs through a level."""
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.id"), nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    time_elapsed_seconds = Column(Integer, nullable=True)
    correct_answers = Column(Integer, default=0, nullable=False)
    incorrect_answers = Column(Integer, default=0, nullable=False)
    stars_earned = Column(Integer, default=0, nullable=False)

class UserAnswer(Base):
    __tablename__ = "user_answers"

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("quiz_attempts.id"), index=True, nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=True)
    user_answer = Column(String(1), nullable=True)
    is_correct = Column(Boolean, nullable=True)
    time_taken_seconds = Column(Integer, nullable=True)

# Ranking recomputation aggregates attempts per user
Index("idx_attempts_user_level", QuizAttempt.user_id, QuizAttempt.level_id)
