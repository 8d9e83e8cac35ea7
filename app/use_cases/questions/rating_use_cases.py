from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.exceptions import ConcurrentUpdateConflict, InvalidRating
from typing import Optional
import logging


logger = logging.getLogger('use_cases')

MIN_RATING = 1
MAX_RATING = 5


class RatingUseCases:
    """
    Ratings are appended with a conflict-free list push and avg_rating is recomputed right
    after from the whole list under WATCH. Concurrent raters therefore never overwrite each
    other's ratings; at worst a recompute is superseded by a newer one.
    """
    def __init__(self, question_repo: QuestionRepoInterface):
        self.question_repo = question_repo

    @staticmethod
    def validate(rating) -> int:
        # bool is an int subclass, True must not pass as rating 1
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRating(f"Rating must be an integer in [{MIN_RATING}, {MAX_RATING}], got {rating!r}")
        return rating

    async def rate(self, question_id: str, rating: int, user_id: Optional[str] = None) -> None:
        """
        Adds a quality rating to a question and refreshes its average.

        :param question_id: The rated question. Unknown ids are ignored.
        :param rating: Integer in [1, 5].
        :param user_id: The rater, only used for logging.
        """
        self.validate(rating)
        extra = {'user': user_id or 'SYSTEM'}

        if not await self.question_repo.append_rating(question_id, rating):
            logger.info(f"Rating for missing question {question_id} ignored", extra=extra)
            return

        try:
            avg_rating = await self.question_repo.recompute_rating(question_id)
        except ConcurrentUpdateConflict:
            # Every lost race means a newer rating was appended, its own recompute includes this one
            logger.warning(f"Recompute of question {question_id} left to a concurrent rater", extra=extra)
            return
        logger.info(f"Question {question_id} rated {rating}, average {avg_rating}", extra=extra)

    async def recompute_all(self) -> int:
        """
        Recomputes avg_rating of every question from its stored ratings.

        :return: Amount of recomputed questions.
        """
        questions = await self.question_repo.get_all()
        recomputed = 0
        for question in questions:
            if await self.question_repo.recompute_rating(question.id) is not None:
                recomputed += 1
        logger.info(f"Recomputed ratings of {recomputed} questions")
        return recomputed
