from app.domain.entities.leaderboard import LeaderboardEntry, UNKNOWN_DISPLAY_NAME
from app.domain.repositories_interfaces.user_repo import UserRepoInterface
from app.domain.exceptions import StoreUnavailable
from config.main_config import LEADERBOARD_COALESCE_DELAY
from typing import Awaitable, Callable, Union
import asyncio
import inspect
import logging


logger = logging.getLogger('use_cases')

OnUpdate = Callable[[list[LeaderboardEntry]], Union[None, Awaitable[None]]]


class LeaderboardUseCases:
    def __init__(self, user_repo: UserRepoInterface, coalesce_delay: float = LEADERBOARD_COALESCE_DELAY):
        self.user_repo = user_repo
        self.coalesce_delay = coalesce_delay

    async def snapshot(self) -> list[LeaderboardEntry]:
        """
        Returns users that answered at least once, most answers first.
        Equal totals are ordered by uid so that rows don't jump between refreshes.
        """
        entries = [
            LeaderboardEntry(uid=user.uid,
                             display_name=user.display_name or UNKNOWN_DISPLAY_NAME,
                             total_answered=user.total_answered)
            for user in await self.user_repo.get_all()
            if user.total_answered > 0
        ]
        entries.sort(key=lambda entry: (-entry.total_answered, entry.uid))
        return entries

    async def _deliver(self, on_update: OnUpdate, stopped: asyncio.Event) -> None:
        try:
            entries = await self.snapshot()
        except StoreUnavailable as e:
            logger.error(f"Leaderboard snapshot failed: {e}")
            return
        if stopped.is_set():
            return
        try:
            result = on_update(entries)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Leaderboard subscriber failed: {e}", exc_info=True)

    async def subscribe(self, on_update: OnUpdate) -> Callable[[], Awaitable[None]]:
        """
        Pushes the full leaderboard to on_update now and after every change of user statistics.

        Changes arriving within coalesce_delay are delivered as one snapshot. Every snapshot
        is complete, never a diff.

        :param on_update: Function or coroutine function receiving the sorted entries.
        :return: Coroutine function that cancels the subscription. No callback fires after it returns.
        """
        changed = asyncio.Event()
        stopped = asyncio.Event()

        async def on_change(_):
            changed.set()

        stop_listening = await self.user_repo.subscribe(on_change)

        async def deliver_updates():
            await self._deliver(on_update, stopped)
            while True:
                await changed.wait()
                await asyncio.sleep(self.coalesce_delay)
                changed.clear()
                await self._deliver(on_update, stopped)

        task = asyncio.create_task(deliver_updates())

        async def cancel():
            stopped.set()
            await stop_listening()
            task.cancel()
            # Called from inside on_update the task stops at its next await instead
            if task is not asyncio.current_task():
                await asyncio.wait([task])

        return cancel
