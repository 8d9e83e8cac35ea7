from app.domain.entities.question import Question
from abc import ABC, abstractmethod
from typing import Optional


class QuestionRepoInterface(ABC):
    @abstractmethod
    async def get(self, question_id: str) -> Optional[Question]:
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> list[Question]:
        raise NotImplementedError

    @abstractmethod
    async def save_many(self, questions: list[Question], creator_id: str) -> None:
        """
        Saves all questions and bumps the creator's total_questions_added in one atomic commit.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, question_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def append_rating(self, question_id: str, rating: int) -> bool:
        """
        Appends the rating without touching other ratings. Returns False if the question doesn't exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def recompute_rating(self, question_id: str) -> Optional[float]:
        """
        Recomputes avg_rating from the stored ratings. Returns None if the question doesn't exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def reset_stats(self, question_ids: list[str]) -> None:
        raise NotImplementedError
