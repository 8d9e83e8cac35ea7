# tests/conftest.py
from datetime import datetime, timezone
import fakeredis
import pytest

from infrastructure.redis_config import RedisPool
from infrastructure.services.repo_service import create_repo_service
from app.domain.entities.question import Question
from app.use_cases.answers.answer_use_cases import AnswerUseCases
from app.use_cases.questions.question_use_cases import QuestionUseCases
from app.use_cases.questions.rating_use_cases import RatingUseCases
from app.use_cases.questions.selection_use_cases import SelectionUseCases
from app.use_cases.users.leaderboard_use_cases import LeaderboardUseCases
from app.use_cases.users.user_use_cases import UserUseCases

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


# --- Store fixtures: a fresh in-memory redis server per test ---
@pytest.fixture
async def redis_pool():
    pool = RedisPool(host="localhost", port=6379, db=0)
    await pool.create_pool(client=fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True))
    yield pool
    await pool.close_pool()


@pytest.fixture
async def repo_service(redis_pool):
    service = create_repo_service(redis_pool)
    yield service
    await service.close()


# --- Use case fixtures ---
@pytest.fixture
def question_use_cases(repo_service):
    return QuestionUseCases(question_repo=repo_service.question_repo)


@pytest.fixture
def selection_use_cases(repo_service):
    return SelectionUseCases(question_repo=repo_service.question_repo, answer_repo=repo_service.answer_repo)


@pytest.fixture
def answer_use_cases(repo_service):
    return AnswerUseCases(answer_repo=repo_service.answer_repo, retry_delay=0)


@pytest.fixture
def rating_use_cases(repo_service):
    return RatingUseCases(question_repo=repo_service.question_repo)


@pytest.fixture
def user_use_cases(repo_service):
    return UserUseCases(user_repo=repo_service.user_repo)


@pytest.fixture
def leaderboard_use_cases(repo_service):
    return LeaderboardUseCases(user_repo=repo_service.user_repo, coalesce_delay=0.01)


# --- Data helpers ---
@pytest.fixture
def add_question(repo_service):
    """Stores a 4-option question (correct option 2) with the given ratings already aggregated."""
    async def _add(question_id, ratings=(), creator="author"):
        question = Question(
            id=question_id,
            text=f"Question {question_id}",
            options=["A", "B", "C", "D"],
            correct_option_index=2,
            created_at=NOW,
            created_by=creator,
        )
        await repo_service.question_repo.save_many([question], creator_id=creator)
        for rating in ratings:
            await repo_service.question_repo.append_rating(question_id, rating)
        if ratings:
            await repo_service.question_repo.recompute_rating(question_id)
        return await repo_service.question_repo.get(question_id)
    return _add


@pytest.fixture
def add_user(user_use_cases):
    async def _add(uid, display_name=None):
        return await user_use_cases.ensure_profile(uid, display_name=display_name or uid.upper(),
                                                   email=f"{uid}@example.com")
    return _add


@pytest.fixture
def answer_on(answer_use_cases):
    """Records an answer of uid on the question without going through the background path."""
    async def _answer(uid, question, chosen_option_index):
        answer = AnswerUseCases.grade(question, chosen_option_index, start_time=NOW, submit_time=NOW)
        await answer_use_cases.record(uid, answer)
        return answer
    return _answer
