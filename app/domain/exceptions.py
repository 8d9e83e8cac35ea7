class QuizEngineError(Exception):
    """Base class for every error raised by the practice engine."""


class InvalidQuestion(QuizEngineError):
    """Question text, options or correct option index are malformed. Raised before any write."""


class InvalidRating(QuizEngineError):
    """Rating is not an integer in [1, 5]."""


class InvalidAnswer(QuizEngineError):
    """Chosen option index does not point into the question options."""


class StoreUnavailable(QuizEngineError):
    """The store could not be reached or the commit failed on transport level."""


class DocumentNotFound(QuizEngineError):
    """An atomic commit references a document that does not exist."""


class ConcurrentUpdateConflict(QuizEngineError):
    """Optimistic transaction kept losing the race after all retries."""


class ExtractionError(QuizEngineError):
    """The question-extraction service returned something that can't be parsed."""
