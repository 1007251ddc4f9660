from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AnswerRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: Optional[int] = None
    user_answer: Optional[str] = Field(None, max_length=1)
    is_correct: Optional[bool] = None
    time_taken_seconds: Optional[int] = None


class AttemptResult(BaseModel):
    """Outcome of one completed quiz attempt, as reported by the quiz session."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    level_id: int
    elapsed_seconds: int
    correct_answers: int
    incorrect_answers: int
    answers: List[AnswerRecord] = Field(default_factory=list)


class ProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    level_id: int
    is_completed: bool
    stars: int
    best_time_seconds: Optional[int] = None
    last_played: Optional[datetime] = None


class RankingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    score: int
    completed_levels: int
    correct_answers: int
    incorrect_answers: int
    average_time_seconds: Optional[int] = None
    last_updated: Optional[datetime] = None


class ProgressOutcome(BaseModel):
    progress: ProgressRead
    ranking: RankingRead
