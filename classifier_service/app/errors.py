"""
errors.py - Failure kinds of the review classification service.
Every error is scoped to a single request and carries its HTTP status.
"""


class ReviewServiceError(Exception):
    status_code: int = 500
    public_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class InvalidInput(ReviewServiceError):
    """Missing, non-string or blank review text. Not retried."""
    status_code = 400
    public_message = "Review text is required"


class ClassifierUnavailable(ReviewServiceError):
    """The model or inference backend could not produce a judgment."""
    status_code = 503
    public_message = "Review classifier is unavailable"


class InternalError(ReviewServiceError):
    # Message stays generic; details only go to the log
    status_code = 500
    public_message = "Internal error"
