"""
Application errors for the guide agent and its collaborators.

ContentNotFoundError is raised by the detail tools when an id does not resolve;
the tool loop hands it back to the model instead of the caller. The other two
are absorbed at the agent boundary and turned into the fallback answer.
"""


class ContentNotFoundError(Exception):
    """Raised when a plant or article id does not exist in the content store."""

    def __init__(self, message: str, item_id: str = "") -> None:
        self.message = message
        self.item_id = item_id
        super().__init__(message)


class RuntimeUnavailableError(Exception):
    """Raised when no language model provider is configured or reachable."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AnswerValidationError(Exception):
    """Raised when the model's final output does not match the {"answer": str} shape."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
