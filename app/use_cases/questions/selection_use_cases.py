from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.repositories_interfaces.answer_repo import AnswerRepoInterface
from app.domain.entities.question import Question
from config.main_config import DEFAULT_BATCH_SIZE
import asyncio
import logging


logger = logging.getLogger('use_cases')


def _best_rated_first(question: Question):
    # Ties are broken by id, the same data always gives the same batch
    return -question.avg_rating, question.id


class SelectionUseCases:
    def __init__(self, question_repo: QuestionRepoInterface, answer_repo: AnswerRepoInterface):
        self.question_repo = question_repo
        self.answer_repo = answer_repo

    async def next_batch(self, user_id: str, batch_size: int = DEFAULT_BATCH_SIZE) -> list[Question]:
        """
        Picks the questions for the next practice round.

        Visible questions the user never answered come first, already answered ones only
        fill up the rest of the batch. Inside both groups the best rated questions go first.
        A question answered several times is simply "answered".

        :param user_id: The learner the batch is built for.
        :param batch_size: Maximal amount of questions in the batch.
        :return: Ordered list of questions, empty only if there are no visible questions.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        questions, answers = await asyncio.gather(
            self.question_repo.get_all(),
            self.answer_repo.get_by_user(user_id),
        )
        answered_ids = {answer.question_id for answer in answers}

        unanswered, answered = [], []
        for question in questions:
            if question.is_hidden:
                continue
            (answered if question.id in answered_ids else unanswered).append(question)

        unanswered.sort(key=_best_rated_first)
        answered.sort(key=_best_rated_first)
        batch = (unanswered + answered)[:batch_size]

        logger.info(f"Batch of {len(batch)} questions, {min(len(unanswered), batch_size)} unanswered",
                    extra={'user': user_id})
        return batch
