# tests/test_selection_use_cases.py
import pytest


def _ids(questions):
    return [question.id for question in questions]


async def test_empty_corpus_gives_empty_batch(selection_use_cases):
    assert await selection_use_cases.next_batch("u1", 10) == []


async def test_best_rated_first_with_id_as_tie_breaker(selection_use_cases, add_question):
    await add_question("b")                          # 5.0, unrated
    await add_question("a")                          # 5.0, unrated
    await add_question("c", ratings=[4, 4, 5])       # 4.3
    await add_question("d", ratings=[5, 5, 4, 2])    # 4.0

    assert _ids(await selection_use_cases.next_batch("u1", 10)) == ["a", "b", "c", "d"]


async def test_hidden_questions_are_never_selected(selection_use_cases, add_question):
    await add_question("good")
    await add_question("bad", ratings=[2, 2, 2])

    assert _ids(await selection_use_cases.next_batch("u1", 10)) == ["good"]


async def test_unanswered_questions_come_before_answered(selection_use_cases, add_question, add_user, answer_on):
    await add_user("u1")
    top = await add_question("top")
    await add_question("mid", ratings=[4, 4, 4])
    await add_question("low", ratings=[4, 3, 4])
    await answer_on("u1", top, 2)

    assert _ids(await selection_use_cases.next_batch("u1", 10)) == ["mid", "low", "top"]
    assert _ids(await selection_use_cases.next_batch("u1", 2)) == ["mid", "low"]


async def test_repeated_answers_count_once(selection_use_cases, add_question, add_user, answer_on):
    await add_user("u1")
    first = await add_question("first")
    second = await add_question("second", ratings=[4, 4, 4])
    await answer_on("u1", first, 0)
    await answer_on("u1", first, 2)
    await answer_on("u1", second, 1)

    # Everything answered: ordering falls back to rating inside the answered group
    assert _ids(await selection_use_cases.next_batch("u1", 10)) == ["first", "second"]


async def test_answers_of_other_users_do_not_matter(selection_use_cases, add_question, add_user, answer_on):
    await add_user("u1")
    top = await add_question("top")
    await add_question("other", ratings=[3, 4, 4])
    await answer_on("u1", top, 2)

    assert _ids(await selection_use_cases.next_batch("u2", 1)) == ["top"]


async def test_batch_is_truncated(selection_use_cases, add_question):
    for i in range(5):
        await add_question(f"q{i}")

    assert len(await selection_use_cases.next_batch("u1", 3)) == 3


@pytest.mark.parametrize("batch_size", [0, -1])
async def test_batch_size_must_be_positive(selection_use_cases, batch_size):
    with pytest.raises(ValueError):
        await selection_use_cases.next_batch("u1", batch_size)
