"""
Exceptions raised by the matching system.
"""


class MatchingError(ValueError):
    """Base error for matching failures caused by bad input."""


class AnalysisProviderError(RuntimeError):
    """Raised when a resume analysis or fit analysis collaborator fails.

    Not a MatchingError: the input was fine, the provider was not.
    """

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class NotFoundError(LookupError):
    """Raised when a stored resume or job does not exist."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id
