# Redis key layout shared by all repositories

QUESTIONS_KEY = 'questions'
USERS_KEY = 'users'
# Published inside every commit that changes a user document
USERS_CHANNEL = 'users:changed'


def question_key(question_id: str) -> str:
    return f'question:{question_id}'


def ratings_key(question_id: str) -> str:
    return f'question:{question_id}:ratings'


def user_key(uid: str) -> str:
    return f'user:{uid}'


def answers_key(uid: str) -> str:
    return f'user:{uid}:answers'
