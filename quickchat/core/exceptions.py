"""Application error taxonomy

None of these errors is fatal: the console layer catches every
``QuickChatError`` and either re-prompts or reports the problem.
"""

from typing import Any, List, Optional


class QuickChatError(Exception):
    """Base class for all application errors"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuickChatError, ValueError):
    """Input failed one of the validation rules"""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateUsernameError(QuickChatError, ValueError):
    """An account with the same username already exists"""

    def __init__(self, username: str) -> None:
        super().__init__("Username already exists. Please choose another.")
        self.username = username


class InvalidCredentialsError(QuickChatError):
    """Login failed; deliberately does not say which field was wrong"""

    def __init__(self) -> None:
        super().__init__("Username or password incorrect, please try again.")


class NotAuthenticatedError(QuickChatError):
    """Operation requires a logged in account"""

    def __init__(self) -> None:
        super().__init__("You must be logged in to do that.")


class StoreReadError(QuickChatError):
    """Persisted state could not be read or parsed"""


class StoreWriteError(QuickChatError):
    """Persisted state could not be written

    ``pending`` holds records the caller still owns in memory and that
    were not written.
    """

    def __init__(self, message: str, pending: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.pending = list(pending or [])


class HashComputationError(QuickChatError):
    """The message digest could not be computed"""
