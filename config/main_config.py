import os


REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
REDIS_DB = int(os.getenv('REDIS_DB', 0))

# Amount of questions delivered for one practice round
DEFAULT_BATCH_SIZE = int(os.getenv('DEFAULT_BATCH_SIZE', 20))

# WATCH/MULTI attempts before ConcurrentUpdateConflict is raised
TRANSACTION_MAX_ATTEMPTS = int(os.getenv('TRANSACTION_MAX_ATTEMPTS', 3))

# Fire-and-forget answer submission
ANSWER_SUBMIT_ATTEMPTS = int(os.getenv('ANSWER_SUBMIT_ATTEMPTS', 3))
ANSWER_RETRY_DELAY = float(os.getenv('ANSWER_RETRY_DELAY', 0.5))

LEADERBOARD_COALESCE_DELAY = float(os.getenv('LEADERBOARD_COALESCE_DELAY', 0.05))

# Backoff of a pub/sub listener that lost its connection, doubled up to the maximum
SUBSCRIBE_RETRY_DELAY = float(os.getenv('SUBSCRIBE_RETRY_DELAY', 0.5))
SUBSCRIBE_MAX_RETRY_DELAY = float(os.getenv('SUBSCRIBE_MAX_RETRY_DELAY', 30))

# Maximum amount of operations committed in one MULTI during the stats reset
RESET_BATCH_LIMIT = int(os.getenv('RESET_BATCH_LIMIT', 500))

EXTRACTION_API_URL = os.getenv('EXTRACTION_API_URL', 'https://api.openai.com/v1/chat/completions')
EXTRACTION_MODEL = os.getenv('EXTRACTION_MODEL', 'gpt-4o')
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')

LOG_FILE = os.getenv('LOG_FILE', 'app.log')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
