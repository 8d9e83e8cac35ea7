from pydantic import BaseModel


UNKNOWN_DISPLAY_NAME = '???'


"""
LeaderboardEntry Entity:
Derived from UserProfile, never stored.
1. uid (str): Identifier of the user, also the tie-breaker for equal totals.
2. display_name (str): Name to show, UNKNOWN_DISPLAY_NAME if the user never set one.
3. total_answered (int): Amount of answers, always > 0 for entries on the leaderboard.
"""
class LeaderboardEntry(BaseModel):
    uid: str
    display_name: str = UNKNOWN_DISPLAY_NAME
    total_answered: int
