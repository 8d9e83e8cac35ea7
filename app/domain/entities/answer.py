from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


"""
Answer Entity:
One attempt of a user on a question. Stored per user and never modified afterwards.
1. question_id (str): Identifier of the answered question.
2. chosen_option_index (int): Index of the option the user picked.
3. is_correct (bool): Whether chosen_option_index is the correct one.
4. start_time (datetime): When the question was shown.
5. submit_time (datetime): When the answer was submitted.
6. rating (int, None): Quality rating in [1, 5] the user gave together with the answer.
"""
class Answer(BaseModel):
    question_id: str
    chosen_option_index: int
    is_correct: bool
    start_time: datetime
    submit_time: datetime
    rating: Optional[int] = Field(default=None, ge=1, le=5)
