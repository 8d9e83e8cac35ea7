from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.services_interfaces.extraction_service import ExtractionServiceInterface
from app.domain.entities.question import Question, QuestionDraft
from app.domain.exceptions import InvalidQuestion
from app.use_cases.utils import generate_question_id
from datetime import datetime, timezone
from pydantic import ValidationError
from typing import Optional
import logging


logger = logging.getLogger('use_cases')


def validate_draft(draft, position: Optional[int] = None) -> QuestionDraft:
    """
    Validates the structural invariants of a question before anything is written.

    :param draft: QuestionDraft or a dictionary with text, options and correct_option_index.
    :param position: Index of the draft in a batch, used in the error message.
    :return: The validated QuestionDraft.
    """
    try:
        return QuestionDraft.model_validate(draft)
    except ValidationError as e:
        where = f"Draft {position}" if position is not None else "Question"
        raise InvalidQuestion(f"{where} is invalid: {e}") from e


class QuestionUseCases:
    def __init__(self, question_repo: QuestionRepoInterface,
                 extraction_service: Optional[ExtractionServiceInterface] = None):
        self.question_repo = question_repo
        self.extraction_service = extraction_service

    @staticmethod
    def _new_question(draft: QuestionDraft, creator: str) -> Question:
        return Question(
            id=generate_question_id(),
            text=draft.text,
            options=draft.options,
            correct_option_index=draft.correct_option_index,
            created_at=datetime.now(timezone.utc),
            created_by=creator,
        )

    async def list_visible(self) -> list[Question]:
        """
        Returns every question that is not hidden by low peer ratings.
        """
        return [question for question in await self.question_repo.get_all() if not question.is_hidden]

    async def list_all(self) -> list[Question]:
        """
        Returns every question including hidden ones, newest first. Questions without
        creation time go last.
        """
        questions = await self.question_repo.get_all()
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(questions, key=lambda question: question.created_at or oldest, reverse=True)

    async def search(self, query: str) -> list[Question]:
        """
        Case-insensitive search in question texts and options. Empty query returns everything.
        """
        questions = await self.list_all()
        query = query.strip().lower()
        if not query:
            return questions
        return [
            question for question in questions
            if query in question.text.lower() or any(query in option.lower() for option in question.options)
        ]

    async def get(self, question_id: str) -> Optional[Question]:
        return await self.question_repo.get(question_id)

    async def count(self) -> int:
        return await self.question_repo.count()

    async def create(self, text: str, options: list[str], correct_index: int, creator: str) -> str:
        """
        Creates a single question with zero statistics.

        :param text: The question text.
        :param options: Answer options, at least 2.
        :param correct_index: Index of the correct option.
        :param creator: uid of the author.
        :return: Identifier of the new question.
        """
        draft = validate_draft({'text': text, 'options': options, 'correct_option_index': correct_index})
        question = self._new_question(draft, creator)
        await self.question_repo.save_many([question], creator_id=creator)
        logger.info(f"Question {question.id} created", extra={'user': creator})
        return question.id

    async def create_batch(self, drafts: list, creator: str) -> int:
        """
        Creates all questions in one atomic commit.

        Every draft is validated before the write is issued, so one malformed draft
        rejects the whole batch and nothing is stored.

        :param drafts: QuestionDraft instances or dictionaries with the same keys.
        :param creator: uid of the author.
        :return: Amount of created questions.
        """
        validated = [validate_draft(draft, position=i) for i, draft in enumerate(drafts)]
        if not validated:
            return 0
        questions = [self._new_question(draft, creator) for draft in validated]
        await self.question_repo.save_many(questions, creator_id=creator)
        logger.info(f"{len(questions)} questions created in batch", extra={'user': creator})
        return len(questions)

    async def import_from_text(self, free_text: str, creator: str) -> int:
        """
        Lets the extraction service turn free text into questions and stores them as one batch.
        Only the structure of the extracted questions is checked, not their content.
        """
        if self.extraction_service is None:
            raise RuntimeError("QuestionUseCases was created without an extraction service")
        drafts = await self.extraction_service.extract(free_text)
        return await self.create_batch(drafts, creator)

    async def delete(self, question_id: str) -> None:
        # Deleting an absent question is fine, the end state is the same
        await self.question_repo.delete(question_id)
        logger.info(f"Question {question_id} deleted")
