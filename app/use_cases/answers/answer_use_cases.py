from app.domain.repositories_interfaces.answer_repo import AnswerRepoInterface
from app.domain.entities.answer import Answer
from app.domain.entities.question import Question
from app.domain.exceptions import InvalidAnswer, StoreUnavailable
from app.use_cases.utils import background_error_handler
from config.main_config import ANSWER_SUBMIT_ATTEMPTS, ANSWER_RETRY_DELAY
from datetime import datetime
from typing import Optional
import asyncio
import logging


logger = logging.getLogger('use_cases')


class AnswerUseCases:
    def __init__(self, answer_repo: AnswerRepoInterface,
                 submit_attempts: int = ANSWER_SUBMIT_ATTEMPTS,
                 retry_delay: float = ANSWER_RETRY_DELAY):
        self.answer_repo = answer_repo
        self.submit_attempts = max(1, submit_attempts)
        self.retry_delay = retry_delay
        # Strong references, the event loop only keeps weak ones to running tasks
        self._pending: set[asyncio.Task] = set()

    @staticmethod
    def grade(question: Question, chosen_option_index: int,
              start_time: datetime, submit_time: datetime, rating: Optional[int] = None) -> Answer:
        """
        Builds the answer record for a choice made on the question.

        :param question: The answered question.
        :param chosen_option_index: Index of the option the user picked.
        :param start_time: When the question was shown.
        :param submit_time: When the answer was submitted.
        :param rating: Optional quality rating given together with the answer.
        :return: Answer with is_correct filled in.
        """
        if not 0 <= chosen_option_index < len(question.options):
            raise InvalidAnswer(
                f"Option {chosen_option_index} does not exist in question {question.id} "
                f"with {len(question.options)} options"
            )
        return Answer(
            question_id=question.id,
            chosen_option_index=chosen_option_index,
            is_correct=question.is_correct(chosen_option_index),
            start_time=start_time,
            submit_time=submit_time,
            rating=rating,
        )

    async def record(self, user_id: str, answer: Answer) -> None:
        """
        Stores the answer and updates times_answered, total_answered and total_correct in
        one atomic commit. Submitting the same answer twice records two attempts.
        """
        await self.answer_repo.record(user_id, answer)
        logger.info(f"Answer on {answer.question_id} recorded, correct: {answer.is_correct}",
                    extra={'user': user_id})

    def submit(self, user_id: str, answer: Answer) -> asyncio.Task:
        """
        Records the answer in the background so that the learner can go on immediately.

        Transport failures are retried with a growing delay, the final failure is logged.
        Nothing is raised to the caller; the returned task never fails.
        """
        task = asyncio.create_task(self._record_in_background(user_id, answer))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @background_error_handler
    async def _record_in_background(self, user_id: str, answer: Answer) -> None:
        for attempt in range(1, self.submit_attempts + 1):
            try:
                await self.record(user_id, answer)
                return
            except StoreUnavailable as e:
                if attempt == self.submit_attempts:
                    raise
                logger.warning(f"Recording answer on {answer.question_id} failed "
                               f"(attempt {attempt}/{self.submit_attempts}): {e}", extra={'user': user_id})
                await asyncio.sleep(self.retry_delay * attempt)

    async def drain(self) -> None:
        """
        Waits until every submitted answer is recorded or given up on.
        """
        if self._pending:
            await asyncio.gather(*self._pending)

    async def answered_question_ids(self, user_id: str) -> set[str]:
        return {answer.question_id for answer in await self.answer_repo.get_by_user(user_id)}

    async def history(self, user_id: str) -> list[Answer]:
        return await self.answer_repo.get_by_user(user_id)
