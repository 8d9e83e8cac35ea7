from app.domain.entities.user import UserProfile
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional


class UserRepoInterface(ABC):
    @abstractmethod
    async def get(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> list[UserProfile]:
        raise NotImplementedError

    @abstractmethod
    async def create_if_absent(self, profile: UserProfile) -> UserProfile:
        """
        Saves the profile unless the user already exists. Returns the stored profile.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_display_name(self, uid: str, display_name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def reset_stats(self, uids: list[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def subscribe(self, handler: Callable[[Optional[str]], Awaitable[None]]) -> Callable[[], Awaitable[None]]:
        """
        Calls handler with the uid every time a user document changes, and with None after a lost
        connection was restored since changes may have been missed.
        Returns a coroutine function that cancels the subscription.
        """
        raise NotImplementedError
