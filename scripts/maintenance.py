"""
Maintenance tasks for the practice platform.

Usage:
    python -m scripts.maintenance reset-stats
    python -m scripts.maintenance recompute-ratings

reset-stats empties the leaderboard, deletes every answer history and resets question
statistics. recompute-ratings rebuilds avg_rating of every question from its ratings.
"""
from infrastructure.redis_config import RedisPool
from infrastructure.services.repo_service import create_repo_service
from app.use_cases.admin.stats_use_cases import StatsUseCases
from app.use_cases.questions.rating_use_cases import RatingUseCases
from config.main_config import REDIS_HOST, REDIS_PORT, REDIS_DB
from config import logging_config # Importing config to apply it
import argparse
import asyncio
import logging


logger = logging.getLogger('use_cases')


async def main(command: str):
    redis_pool = RedisPool(host=REDIS_HOST, port=REDIS_PORT, db=REDIS_DB)
    await redis_pool.create_pool()
    repo_service = create_repo_service(redis_pool)
    try:
        if command == 'reset-stats':
            stats_use_cases = StatsUseCases(question_repo=repo_service.question_repo,
                                            user_repo=repo_service.user_repo,
                                            answer_repo=repo_service.answer_repo)
            result = await stats_use_cases.reset_all()
            logger.info(f"Reset finished: {result['users']} users, {result['questions']} questions")
        elif command == 'recompute-ratings':
            rating_use_cases = RatingUseCases(question_repo=repo_service.question_repo)
            await rating_use_cases.recompute_all()
    finally:
        await repo_service.close()
        await redis_pool.close_pool()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('command', choices=['reset-stats', 'recompute-ratings'])
    args = parser.parse_args()
    asyncio.run(main(args.command))
