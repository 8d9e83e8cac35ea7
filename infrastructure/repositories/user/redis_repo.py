from infrastructure.redis_config import RedisPool, store_errors
from infrastructure.repositories.keys import USERS_KEY, USERS_CHANNEL, user_key
from app.domain.repositories_interfaces.user_repo import UserRepoInterface
from app.domain.entities.user import UserProfile
from typing import Awaitable, Callable, Optional


class RedisUserRepo(UserRepoInterface):
    def __init__(self, redis_pool: RedisPool):
        self.redis_pool = redis_pool

    @staticmethod
    def _from_hash(uid: str, data: dict) -> Optional[UserProfile]:
        if not data:
            return None
        return UserProfile.model_validate({**data, 'uid': uid})

    @store_errors
    async def get(self, uid: str) -> Optional[UserProfile]:
        async with await self.redis_pool.get_connection() as conn:
            data = await conn.hgetall(user_key(uid))
            return self._from_hash(uid, data)

    @store_errors
    async def get_all(self) -> list[UserProfile]:
        async with await self.redis_pool.get_connection() as conn:
            uids = sorted(await conn.smembers(USERS_KEY))
            if not uids:
                return []
            async with conn.pipeline(transaction=True) as pipe:
                for uid in uids:
                    pipe.hgetall(user_key(uid))
                results = await pipe.execute()
        users = [self._from_hash(uid, data) for uid, data in zip(uids, results)]
        return [user for user in users if user]

    @store_errors
    async def create_if_absent(self, profile: UserProfile) -> UserProfile:
        key = user_key(profile.uid)

        async def create(pipe):
            existing = await pipe.hgetall(key)
            pipe.multi()
            if existing:
                return self._from_hash(profile.uid, existing)
            pipe.hset(key, mapping=profile.model_dump(mode='json', exclude={'uid'}, exclude_none=True))
            pipe.sadd(USERS_KEY, profile.uid)
            pipe.publish(USERS_CHANNEL, profile.uid)
            return profile

        return await self.redis_pool.transaction(create, key)

    @store_errors
    async def update_display_name(self, uid: str, display_name: str) -> bool:
        async with await self.redis_pool.get_connection() as conn:
            if not await conn.exists(user_key(uid)):
                return False
            async with conn.pipeline(transaction=True) as pipe:
                pipe.hset(user_key(uid), 'display_name', display_name)
                pipe.publish(USERS_CHANNEL, uid)
                await pipe.execute()
            return True

    @store_errors
    async def reset_stats(self, uids: list[str]) -> None:
        async with await self.redis_pool.get_connection() as conn:
            async with conn.pipeline(transaction=True) as pipe:
                for uid in uids:
                    pipe.hset(user_key(uid), mapping={'total_answered': 0, 'total_correct': 0})
                pipe.publish(USERS_CHANNEL, 'reset')
                await pipe.execute()

    @store_errors
    async def subscribe(self, handler: Callable[[Optional[str]], Awaitable[None]]) -> Callable[[], Awaitable[None]]:
        return await self.redis_pool.subscribe(USERS_CHANNEL, handler)
