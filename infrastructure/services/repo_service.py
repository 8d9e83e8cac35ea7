from infrastructure.redis_config import RedisPool
from infrastructure.repositories.question.redis_repo import RedisQuestionRepo
from infrastructure.repositories.user.redis_repo import RedisUserRepo
from infrastructure.repositories.answer.redis_repo import RedisAnswerRepo
from infrastructure.services.aiohttp_service import AiohttpService
from infrastructure.services.extraction_service import OpenAIExtractionService


# Container for the repositories and services the use cases are built from
class RepoService:
    def __init__(self, question_repo, user_repo, answer_repo,
                 aiohttp_service, extraction_service):
        self.question_repo = question_repo
        self.user_repo = user_repo
        self.answer_repo = answer_repo
        self.aiohttp_service = aiohttp_service
        self.extraction_service = extraction_service

    async def close(self):
        await self.aiohttp_service.close()


def create_repo_service(redis_pool: RedisPool) -> RepoService:
    # Creating repo instances on top of the same redis pool
    aiohttp_service = AiohttpService()
    return RepoService(
        question_repo=RedisQuestionRepo(redis_pool),
        user_repo=RedisUserRepo(redis_pool),
        answer_repo=RedisAnswerRepo(redis_pool),
        aiohttp_service=aiohttp_service,
        extraction_service=OpenAIExtractionService(aiohttp_service),
    )
