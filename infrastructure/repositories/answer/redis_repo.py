from infrastructure.redis_config import RedisPool, store_errors
from infrastructure.repositories.keys import (QUESTIONS_KEY, USERS_CHANNEL, answers_key,
                                              question_key, user_key)
from app.domain.repositories_interfaces.answer_repo import AnswerRepoInterface
from app.domain.entities.answer import Answer
from app.domain.exceptions import DocumentNotFound


class RedisAnswerRepo(AnswerRepoInterface):
    def __init__(self, redis_pool: RedisPool):
        self.redis_pool = redis_pool

    @store_errors
    async def get_by_user(self, uid: str) -> list[Answer]:
        async with await self.redis_pool.get_connection() as conn:
            data = await conn.lrange(answers_key(uid), 0, -1)
            return [Answer.model_validate_json(answer) for answer in data]

    @store_errors
    async def record(self, uid: str, answer: Answer) -> None:
        async with await self.redis_pool.get_connection() as conn:
            # HINCRBY would silently create a half-empty document, so both targets must exist
            if not await conn.sismember(QUESTIONS_KEY, answer.question_id):
                raise DocumentNotFound(f"Question {answer.question_id} does not exist")
            if not await conn.exists(user_key(uid)):
                raise DocumentNotFound(f"User {uid} does not exist")

            async with conn.pipeline(transaction=True) as pipe:
                pipe.rpush(answers_key(uid), answer.model_dump_json())
                pipe.hincrby(question_key(answer.question_id), 'times_answered', 1)
                pipe.hincrby(user_key(uid), 'total_answered', 1)
                pipe.hincrby(user_key(uid), 'total_correct', int(answer.is_correct))
                pipe.publish(USERS_CHANNEL, uid)
                await pipe.execute()

    @store_errors
    async def delete_by_users(self, uids: list[str]) -> None:
        if not uids:
            return
        async with await self.redis_pool.get_connection() as conn:
            await conn.delete(*[answers_key(uid) for uid in uids])
