from infrastructure.redis_config import RedisPool, store_errors
from infrastructure.repositories.keys import QUESTIONS_KEY, question_key, ratings_key, user_key
from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.entities.question import Question, DEFAULT_AVG_RATING, rolling_average
from typing import Optional
import json


class RedisQuestionRepo(QuestionRepoInterface):
    """
    Questions are stored as hashes with the options JSON encoded. Ratings live in a separate list
    so that appending one never rewrites the others, and the 'questions' set is the index of ids.
    """
    def __init__(self, redis_pool: RedisPool):
        self.redis_pool = redis_pool

    @staticmethod
    def _to_hash(question: Question) -> dict:
        data = question.model_dump(mode='json', exclude={'id', 'ratings'}, exclude_none=True)
        data['options'] = json.dumps(data['options'], ensure_ascii=False)
        return data

    @staticmethod
    def _from_hash(question_id: str, data: dict, ratings: list) -> Optional[Question]:
        # Hash without text is a leftover counter of a deleted question
        if 'text' not in data:
            return None
        return Question.model_validate({
            **data,
            'id': question_id,
            'options': json.loads(data['options']),
            'ratings': [int(rating) for rating in ratings],
        })

    @store_errors
    async def get(self, question_id: str) -> Optional[Question]:
        async with await self.redis_pool.get_connection() as conn:
            async with conn.pipeline(transaction=True) as pipe:
                data, ratings = await pipe.hgetall(question_key(question_id)).lrange(ratings_key(question_id), 0, -1).execute()
        return self._from_hash(question_id, data, ratings)

    @store_errors
    async def get_all(self) -> list[Question]:
        async with await self.redis_pool.get_connection() as conn:
            ids = sorted(await conn.smembers(QUESTIONS_KEY))
            if not ids:
                return []
            # Every question is read from the same point in time
            async with conn.pipeline(transaction=True) as pipe:
                for question_id in ids:
                    pipe.hgetall(question_key(question_id))
                    pipe.lrange(ratings_key(question_id), 0, -1)
                results = await pipe.execute()
        questions = []
        for i, question_id in enumerate(ids):
            question = self._from_hash(question_id, results[2 * i], results[2 * i + 1])
            if question:
                questions.append(question)
        return questions

    @store_errors
    async def save_many(self, questions: list[Question], creator_id: str) -> None:
        async with await self.redis_pool.get_connection() as conn:
            creator_exists = await conn.exists(user_key(creator_id))
            async with conn.pipeline(transaction=True) as pipe:
                for question in questions:
                    pipe.hset(question_key(question.id), mapping=self._to_hash(question))
                    pipe.sadd(QUESTIONS_KEY, question.id)
                # Profiles are created on the first sign-in, a missing one is not recreated from a counter
                if creator_exists:
                    pipe.hincrby(user_key(creator_id), 'total_questions_added', len(questions))
                await pipe.execute()

    @store_errors
    async def delete(self, question_id: str) -> None:
        async with await self.redis_pool.get_connection() as conn:
            async with conn.pipeline(transaction=True) as pipe:
                pipe.srem(QUESTIONS_KEY, question_id)
                pipe.delete(question_key(question_id), ratings_key(question_id))
                await pipe.execute()

    @store_errors
    async def count(self) -> int:
        async with await self.redis_pool.get_connection() as conn:
            return await conn.scard(QUESTIONS_KEY)

    @store_errors
    async def append_rating(self, question_id: str, rating: int) -> bool:
        async with await self.redis_pool.get_connection() as conn:
            # RPUSH keeps duplicates and commutes with concurrent appends
            async with conn.pipeline(transaction=True) as pipe:
                exists, _ = await pipe.sismember(QUESTIONS_KEY, question_id).rpush(
                    ratings_key(question_id), rating).execute()
            if not exists:
                # A question outside the index owns no ratings list
                await conn.delete(ratings_key(question_id))
            return bool(exists)

    @store_errors
    async def recompute_rating(self, question_id: str) -> Optional[float]:
        async def recompute(pipe):
            ratings = await pipe.lrange(ratings_key(question_id), 0, -1)
            exists = await pipe.sismember(QUESTIONS_KEY, question_id)
            avg_rating = rolling_average([int(rating) for rating in ratings])
            pipe.multi()
            if exists:
                pipe.hset(question_key(question_id), 'avg_rating', avg_rating)
            return avg_rating if exists else None

        # Only the ratings list is watched: a newer append invalidates the average, other fields don't
        return await self.redis_pool.transaction(recompute, ratings_key(question_id))

    @store_errors
    async def reset_stats(self, question_ids: list[str]) -> None:
        async with await self.redis_pool.get_connection() as conn:
            async with conn.pipeline(transaction=True) as pipe:
                for question_id in question_ids:
                    pipe.hset(question_key(question_id), mapping={'times_answered': 0,
                                                                  'avg_rating': DEFAULT_AVG_RATING})
                    pipe.delete(ratings_key(question_id))
                await pipe.execute()
