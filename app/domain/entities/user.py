from datetime import datetime
from pydantic import BaseModel
from typing import Optional


"""
UserProfile Entity:
1. uid (str): Unique identifier of the user. Cannot be None.
2. display_name (str, None): Name shown on the leaderboard.
3. email (str, None): Email the user signed in with.
4. created_at (datetime, None): Time of the first sign-in.
5. total_answered (int): Amount of recorded answers, every attempt counts.
6. total_correct (int): Amount of correct answers, never bigger than total_answered.
7. total_questions_added (int): Amount of questions the user authored.
"""
class UserProfile(BaseModel):
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    total_answered: int = 0
    total_correct: int = 0
    total_questions_added: int = 0
