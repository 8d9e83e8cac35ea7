from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.repositories_interfaces.user_repo import UserRepoInterface
from app.domain.repositories_interfaces.answer_repo import AnswerRepoInterface
from config.main_config import RESET_BATCH_LIMIT
import logging


logger = logging.getLogger('use_cases')


def _chunks(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class StatsUseCases:
    def __init__(self, question_repo: QuestionRepoInterface, user_repo: UserRepoInterface,
                 answer_repo: AnswerRepoInterface, batch_limit: int = RESET_BATCH_LIMIT):
        self.question_repo = question_repo
        self.user_repo = user_repo
        self.answer_repo = answer_repo
        self.batch_limit = batch_limit

    async def reset_all(self) -> dict:
        """
        Resets the statistics of the whole platform and empties the leaderboard.

        1. total_answered and total_correct of every user become 0.
        2. Answer histories of every user are deleted.
        3. times_answered, ratings and avg_rating of every question are reset.

        Each chunk of at most batch_limit documents is committed atomically, the reset
        as a whole is not.

        :return: Amount of reset users and questions.
        """
        users = await self.user_repo.get_all()
        uids = [user.uid for user in users]
        for chunk in _chunks(uids, self.batch_limit):
            await self.user_repo.reset_stats(chunk)
            await self.answer_repo.delete_by_users(chunk)
        logger.info(f"Statistics of {len(uids)} users reset")

        questions = await self.question_repo.get_all()
        question_ids = [question.id for question in questions]
        for chunk in _chunks(question_ids, self.batch_limit):
            await self.question_repo.reset_stats(chunk)
        logger.info(f"Statistics of {len(question_ids)} questions reset")

        return {'users': len(uids), 'questions': len(question_ids)}
