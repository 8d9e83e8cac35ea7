# tests/test_question_use_cases.py
from unittest.mock import AsyncMock

import pytest
from redis.asyncio.client import Pipeline
from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.exceptions import InvalidQuestion, StoreUnavailable
from app.use_cases.questions.question_use_cases import QuestionUseCases


async def test_create_initialises_statistics(question_use_cases):
    question_id = await question_use_cases.create("Capital of France?", ["Rome", "Paris"], 1, creator="u1")

    question = await question_use_cases.get(question_id)
    assert question.text == "Capital of France?"
    assert question.options == ["Rome", "Paris"]
    assert question.correct_option_index == 1
    assert question.created_by == "u1"
    assert question.created_at is not None
    assert question.times_answered == 0
    assert question.ratings == []
    assert question.avg_rating == 5


@pytest.mark.parametrize("options, index", [(["only"], 0), (["a", "b"], 2), (["a", "b"], -1)])
async def test_create_rejects_invalid_question_before_writing(question_use_cases, options, index):
    with pytest.raises(InvalidQuestion):
        await question_use_cases.create("Q?", options, index, creator="u1")
    assert await question_use_cases.count() == 0


async def test_create_counts_questions_of_existing_creator(question_use_cases, user_use_cases, add_user):
    await add_user("u1")
    await question_use_cases.create("Q?", ["a", "b"], 0, creator="u1")
    await question_use_cases.create_batch([
        {"text": "Q2?", "options": ["a", "b"], "correct_option_index": 1},
        {"text": "Q3?", "options": ["a", "b", "c"], "correct_option_index": 2},
    ], creator="u1")

    assert (await user_use_cases.get("u1")).total_questions_added == 3


async def test_create_for_unknown_creator_does_not_create_profile(question_use_cases, user_use_cases):
    await question_use_cases.create("Q?", ["a", "b"], 0, creator="ghost")
    assert await user_use_cases.get("ghost") is None


async def test_batch_is_rejected_as_a_whole(question_use_cases):
    drafts = [
        {"text": "Q1?", "options": ["a", "b"], "correct_option_index": 0},
        {"text": "Q2?", "options": ["a", "b"], "correct_option_index": 5},
    ]
    with pytest.raises(InvalidQuestion, match="Draft 1"):
        await question_use_cases.create_batch(drafts, creator="u1")
    assert await question_use_cases.count() == 0


async def test_empty_batch_writes_nothing(question_use_cases):
    assert await question_use_cases.create_batch([], creator="u1") == 0
    assert await question_use_cases.count() == 0


async def test_delete_is_idempotent(question_use_cases):
    question_id = await question_use_cases.create("Q?", ["a", "b"], 0, creator="u1")
    await question_use_cases.delete(question_id)
    await question_use_cases.delete(question_id)
    await question_use_cases.delete("never-existed")

    assert await question_use_cases.get(question_id) is None
    assert await question_use_cases.count() == 0


async def test_list_visible_skips_hidden_questions(question_use_cases, add_question):
    await add_question("fresh")
    await add_question("good", ratings=[5, 5, 4, 2])
    await add_question("bad", ratings=[2, 2, 2])
    await add_question("too-few", ratings=[1, 1])

    visible = {question.id for question in await question_use_cases.list_visible()}
    assert visible == {"fresh", "good", "too-few"}

    everything = {question.id for question in await question_use_cases.list_all()}
    assert everything == {"fresh", "good", "bad", "too-few"}


async def test_list_visible_fails_without_partial_results(question_use_cases, add_question, monkeypatch):
    await add_question("q1")

    async def broken_execute(self, raise_on_error=True):
        raise RedisConnectionError("connection reset")

    monkeypatch.setattr(Pipeline, "execute", broken_execute)
    with pytest.raises(StoreUnavailable):
        await question_use_cases.list_visible()


async def test_search_matches_text_and_options(question_use_cases):
    await question_use_cases.create("Who wrote Hamlet?", ["Shakespeare", "Marlowe"], 0, creator="u1")
    await question_use_cases.create("Largest planet?", ["Jupiter", "Mars"], 0, creator="u1")

    assert [q.text for q in await question_use_cases.search("hamlet")] == ["Who wrote Hamlet?"]
    assert [q.text for q in await question_use_cases.search("MARS")] == ["Largest planet?"]
    assert len(await question_use_cases.search("  ")) == 2


async def test_import_from_text_stores_extracted_questions(repo_service):
    extraction_service = AsyncMock()
    extraction_service.extract.return_value = [
        {"text": "Q1?", "options": ["a", "b", "c", "d", "e"], "correct_option_index": 4},
        {"text": "Q2?", "options": ["a", "b"], "correct_option_index": "1"},
    ]
    use_cases = QuestionUseCases(question_repo=repo_service.question_repo, extraction_service=extraction_service)

    assert await use_cases.import_from_text("some notes", creator="u1") == 2
    extraction_service.extract.assert_awaited_once_with("some notes")
    options = sorted(len(question.options) for question in await use_cases.list_all())
    assert options == [2, 5]


async def test_import_from_text_rejects_structurally_broken_extraction(repo_service):
    extraction_service = AsyncMock()
    extraction_service.extract.return_value = [
        {"text": "Q1?", "options": ["a", "b"], "correct_option_index": 0},
        {"text": "Q2?", "options": None, "correct_option_index": 0},
    ]
    use_cases = QuestionUseCases(question_repo=repo_service.question_repo, extraction_service=extraction_service)

    with pytest.raises(InvalidQuestion):
        await use_cases.import_from_text("some notes", creator="u1")
    assert await use_cases.count() == 0
