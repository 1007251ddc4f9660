class QuizError(Exception):
    """Base class for errors raised by the quiz services."""
    pass

class NotFoundError(QuizError):
    """A referenced level or user does not exist."""
    pass

class InvalidInputError(QuizError):
    """Attempt data is malformed (negative time or answer counts)."""
    pass

class ConflictError(QuizError):
    """A concurrent update for the same user kept conflicting after retry."""
    pass
