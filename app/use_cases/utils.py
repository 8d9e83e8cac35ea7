from functools import wraps
import logging
import secrets


logger = logging.getLogger('utils')


def background_error_handler(func):
    """
    A decorator for coroutines that run as fire-and-forget tasks.

    Nobody awaits such a task, so an exception would only surface as an
    "exception was never retrieved" warning. The error is logged instead.

    :param func: The asynchronous function to be wrapped.
    :return: The wrapped function with error logging.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
    return wrapper


def generate_question_id() -> str:
    """
    Generates a random 16 characters long question ID.

    :return: A string of hex digits.
    """
    return secrets.token_hex(8)
