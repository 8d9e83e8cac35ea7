from redis.asyncio import Redis
from redis.asyncio.client import Pipeline
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.exceptions import WatchError
from app.domain.exceptions import StoreUnavailable, ConcurrentUpdateConflict
from config.main_config import TRANSACTION_MAX_ATTEMPTS, SUBSCRIBE_RETRY_DELAY, SUBSCRIBE_MAX_RETRY_DELAY
from functools import wraps
from typing import Any, Awaitable, Callable, Optional
import asyncio
import logging


logger = logging.getLogger('repositories')


def store_errors(func):
    """
    A decorator for repository coroutines that turns redis transport errors into StoreUnavailable.

    :param func: The asynchronous repository method to be wrapped.
    :return: The wrapped method.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailable(f"{func.__qualname__} failed: {e}") from e
    return wrapper


class RedisPool:
    def __init__(self, host: str, port: int, db: int):
        self.host = host
        self.port = port
        self.db = db
        self.pool = None

    async def create_pool(self, client: Optional[Redis] = None):
        # An already configured client (e.g. a fake server in tests) can be reused instead of connecting
        if client is not None:
            self.pool = client
        else:
            self.pool = await Redis(host=self.host, port=self.port, db=self.db, decode_responses=True)

    async def get_connection(self) -> Redis:
        return self.pool.client()

    async def close_pool(self):
        await self.pool.aclose()
        self.pool = None

    async def transaction(self, func: Callable[[Pipeline], Awaitable[Any]], *watches: str,
                          max_attempts: int = TRANSACTION_MAX_ATTEMPTS) -> Any:
        """
        Runs an optimistic read-modify-write transaction.

        The watched keys are read by func in immediate mode, then func calls pipe.multi()
        and queues the writes. If any watched key is changed by somebody else before EXEC,
        func is run again on fresh data.

        :param func: Coroutine function receiving the pipeline. Its return value is returned on success.
        :param watches: Keys that must stay unchanged between the reads and the commit.
        :param max_attempts: Amount of attempts before giving up.
        :return: Result of the successful func call.
        """
        async with await self.get_connection() as conn:
            for attempt in range(1, max_attempts + 1):
                async with conn.pipeline(transaction=True) as pipe:
                    try:
                        await pipe.watch(*watches)
                        result = await func(pipe)
                        await pipe.execute()
                        return result
                    except WatchError:
                        logger.debug(f"Transaction on {watches} lost the race, attempt {attempt}/{max_attempts}")
        raise ConcurrentUpdateConflict(f"Transaction on {watches} failed after {max_attempts} attempts")

    async def subscribe(self, channel: str, handler: Callable[[Optional[str]], Awaitable[None]],
                        retry_delay: Optional[float] = None,
                        max_retry_delay: Optional[float] = None) -> Callable[[], Awaitable[None]]:
        """
        Listens to a pub/sub channel in a background task and awaits handler for every message.

        A lost connection is re-established with exponential backoff. Messages published in
        the meantime are gone, so handler is awaited with None once the subscription is back.

        :param channel: The channel to listen to.
        :param handler: Coroutine function receiving the message data.
        :param retry_delay: First delay before resubscribing, SUBSCRIBE_RETRY_DELAY by default.
        :param max_retry_delay: Upper bound of the doubled delay, SUBSCRIBE_MAX_RETRY_DELAY by default.
        :return: Coroutine function that stops listening and closes the pub/sub connection.
        """
        retry_delay = SUBSCRIBE_RETRY_DELAY if retry_delay is None else retry_delay
        max_retry_delay = SUBSCRIBE_MAX_RETRY_DELAY if max_retry_delay is None else max_retry_delay
        pubsub = self.pool.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe(channel)

        async def listen():
            delay = retry_delay
            while True:
                try:
                    async for message in pubsub.listen():
                        if message['type'] == 'message':
                            await handler(message['data'])
                    return
                except (RedisConnectionError, RedisTimeoutError) as e:
                    logger.warning(f"Subscription to {channel} lost its connection, retrying in {delay}s: {e}")
                await asyncio.sleep(delay)
                delay = min(delay * 2, max_retry_delay)
                try:
                    await pubsub.subscribe(channel)
                except (RedisConnectionError, RedisTimeoutError) as e:
                    logger.error(f"Resubscribing to {channel} failed: {e}")
                    continue
                logger.info(f"Subscription to {channel} restored")
                delay = retry_delay
                await handler(None)

        task = asyncio.create_task(listen())

        async def cancel():
            task.cancel()
            # asyncio.wait leaves a cancellation of the caller itself propagating
            if task is not asyncio.current_task():
                await asyncio.wait([task])
            await pubsub.aclose()

        return cancel
