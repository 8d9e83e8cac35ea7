from app.domain.entities.answer import Answer
from abc import ABC, abstractmethod


class AnswerRepoInterface(ABC):
    @abstractmethod
    async def get_by_user(self, uid: str) -> list[Answer]:
        raise NotImplementedError

    @abstractmethod
    async def record(self, uid: str, answer: Answer) -> None:
        """
        Appends the answer to the user's history and increments question and user counters
        in one atomic commit. Either every effect is applied or none.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_by_users(self, uids: list[str]) -> None:
        raise NotImplementedError
