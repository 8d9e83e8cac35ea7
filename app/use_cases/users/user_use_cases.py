from app.domain.entities.user import UserProfile
from app.domain.entities.leaderboard import UNKNOWN_DISPLAY_NAME
from app.domain.repositories_interfaces.user_repo import UserRepoInterface
from datetime import datetime, timezone
from typing import Optional
import logging


logger = logging.getLogger('use_cases')


class UserUseCases:
    def __init__(self, user_repo: UserRepoInterface):
        self.user_repo = user_repo

    async def ensure_profile(self, uid: str, display_name: Optional[str] = None,
                             email: Optional[str] = None) -> UserProfile:
        """
        Creates the profile with zero statistics on the first sign-in.
        Later sign-ins return the stored profile untouched.

        :param uid: The unique identifier of the user.
        :param display_name: Name to show on the leaderboard.
        :param email: Email the user signed in with.
        :return: The stored profile.
        """
        profile = UserProfile(uid=uid, display_name=display_name, email=email,
                              created_at=datetime.now(timezone.utc))
        stored = await self.user_repo.create_if_absent(profile)
        if stored is profile:
            logger.info("New user profile created", extra={'user': uid})
        return stored

    async def get(self, uid: str) -> Optional[UserProfile]:
        return await self.user_repo.get(uid)

    async def set_display_name(self, uid: str, display_name: str) -> bool:
        display_name = display_name.strip()
        if not display_name:
            raise ValueError("Display name can't be blank")
        updated = await self.user_repo.update_display_name(uid, display_name)
        if updated:
            logger.info(f"Display name changed to {display_name}", extra={'user': uid})
        return updated

    async def display_names(self, uids: list[str]) -> dict[str, str]:
        """
        Maps uids to display names, e.g. for the authors of questions.
        Unknown users and users without a name get UNKNOWN_DISPLAY_NAME.
        """
        wanted = set(uids)
        names = {uid: UNKNOWN_DISPLAY_NAME for uid in wanted}
        for user in await self.user_repo.get_all():
            if user.uid in wanted and user.display_name:
                names[user.uid] = user.display_name
        return names
