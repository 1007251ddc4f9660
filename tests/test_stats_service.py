import pytest

from schemas.progress import AttemptResult, AnswerRecord
from services.progress_service import ProgressService
from services.stats_service import StatsService


async def play(db, user_id, level_id, elapsed, correct, incorrect=0, answers=()):
    return await ProgressService(db).record_attempt(AttemptResult(
        user_id=user_id,
        level_id=level_id,
        elapsed_seconds=elapsed,
        correct_answers=correct,
        incorrect_answers=incorrect,
        answers=[AnswerRecord(user_answer=choice, is_correct=ok) for choice, ok in answers]
    ))


@pytest.mark.asyncio
async def test_leaderboard_is_empty_before_first_attempt(seeded):
    assert await StatsService(seeded).get_leaderboard() == []


@pytest.mark.asyncio
async def test_leaderboard_orders_by_score(seeded):
    await play(seeded, 1, 1, 120, 6, 6)     # 60
    await play(seeded, 2, 1, 90, 12)        # 80
    await play(seeded, 2, 2, 70, 9, 1)      # +80
    await play(seeded, 3, 2, 100, 7, 3)     # 70

    board = await StatsService(seeded).get_leaderboard()

    assert [row["user_id"] for row in board] == [2, 3, 1]
    assert [row["rank"] for row in board] == [1, 2, 3]
    assert board[0]["score"] == 160
    assert board[0]["name"] == "João"
    assert board[0]["completed_levels"] == 2
    assert board[0]["correct_answers"] == 21
    assert board[1]["church"] == "Bethel"


@pytest.mark.asyncio
async def test_leaderboard_respects_limit(seeded):
    await play(seeded, 1, 1, 120, 6)
    await play(seeded, 2, 1, 90, 12)

    board = await StatsService(seeded).get_leaderboard(limit=1)

    assert len(board) == 1
    assert board[0]["user_id"] == 2


@pytest.mark.asyncio
async def test_user_rank(seeded):
    await play(seeded, 1, 1, 120, 6)
    await play(seeded, 2, 1, 90, 12)

    stats = StatsService(seeded)
    first = await stats.get_user_rank(2)
    second = await stats.get_user_rank(1)

    assert first["rank"] == 1
    assert second["rank"] == 2
    assert second["score"] == 60
    assert await stats.get_user_rank(3) is None


@pytest.mark.asyncio
async def test_leaderboard_with_zero_limit_is_empty(seeded):
    await play(seeded, 1, 1, 120, 6)

    assert await StatsService(seeded).get_leaderboard(limit=0) == []


@pytest.mark.asyncio
async def test_user_progress_in_level_order(seeded):
    await play(seeded, 1, 2, 80, 7, 3, answers=[("A", True), ("B", False)])
    await play(seeded, 1, 1, 120, 6, 6, answers=[("B", True), ("C", False), ("D", False)])
    await play(seeded, 1, 1, 100, 11, 1, answers=[("A", True), ("A", True)])

    progress = await StatsService(seeded).get_user_progress(1)

    assert [row["level_name"] for row in progress] == ["Gênesis", "Êxodo"]
    genesis, exodus = progress
    assert genesis["stars"] == 3
    assert genesis["best_time_seconds"] == 100
    # Counted from the per-question answer log, not the attempt totals
    assert genesis["correct_answers"] == 3
    assert genesis["incorrect_answers"] == 2
    assert exodus["stars"] == 2
    assert exodus["is_completed"] is True
    assert (exodus["correct_answers"], exodus["incorrect_answers"]) == (1, 1)
    assert await StatsService(seeded).get_user_progress(2) == []


@pytest.mark.asyncio
async def test_user_progress_without_answer_log(seeded):
    await play(seeded, 1, 1, 120, 6, 6)

    (genesis,) = await StatsService(seeded).get_user_progress(1)

    assert genesis["correct_answers"] == 0
    assert genesis["incorrect_answers"] == 0
