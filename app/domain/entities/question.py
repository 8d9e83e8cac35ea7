from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


# Optimistic prior for unrated questions
DEFAULT_AVG_RATING = 5.0
HIDE_RATING_THRESHOLD = 3
# Minimal amount of ratings before a low average is trusted
MIN_RATINGS_TO_HIDE = 3


def rolling_average(ratings: list[int]) -> float:
    """
    Mean of the ratings rounded half-up to one decimal, 4.25 -> 4.3.

    :param ratings: All ratings ever submitted for a question.
    :return: Rounded mean or DEFAULT_AVG_RATING for an empty list.
    """
    if not ratings:
        return DEFAULT_AVG_RATING
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


"""
QuestionDraft Entity:
Structural part of a question before it gets an id. Produced by authors and by the extraction service.
1. text (str): The question itself. Can't be blank.
2. options (list[str]): Answer options, at least 2.
3. correct_option_index (int): Index of the correct option in options.
"""
class QuestionDraft(BaseModel):
    text: str
    options: list[str]
    correct_option_index: int

    @field_validator('text')
    @classmethod
    def text_is_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('question text is blank')
        return value

    @model_validator(mode='after')
    def options_are_consistent(self) -> 'QuestionDraft':
        if len(self.options) < 2:
            raise ValueError(f'question needs at least 2 options, got {len(self.options)}')
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(
                f'correct option index {self.correct_option_index} is out of range for {len(self.options)} options'
            )
        return self


"""
Question Entity:
1. id (str): Unique identifier for the question.
2. text, options, correct_option_index: See QuestionDraft.
3. created_at (datetime, None): Creation time, None for documents created before the field existed.
4. created_by (str): uid of the author. Used for attribution only.
5. times_answered (int): Amount of recorded attempts over all users.
6. ratings (list[int]): Every quality rating in [1, 5], duplicates included.
7. avg_rating (float): rolling_average(ratings), maintained by the rating aggregator.
"""
class Question(BaseModel):
    id: str
    text: str
    options: list[str]
    correct_option_index: int
    created_at: Optional[datetime] = None
    created_by: str = ''
    times_answered: int = 0
    ratings: list[int] = Field(default_factory=list)
    avg_rating: float = DEFAULT_AVG_RATING

    @property
    def is_hidden(self) -> bool:
        return self.avg_rating <= HIDE_RATING_THRESHOLD and len(self.ratings) >= MIN_RATINGS_TO_HIDE

    def is_correct(self, chosen_option_index: int) -> bool:
        return chosen_option_index == self.correct_option_index
