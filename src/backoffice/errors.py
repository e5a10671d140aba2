from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class AllocationError(Exception):
    """Raised when a sequential ID cannot be allocated.

    The entity document must not be created when this is raised.
    """

    def __init__(self, entity_name: str, reason: str) -> None:
        super().__init__(f"Failed to allocate ID for '{entity_name}': {reason}")
        self.entity_name = entity_name


class ReleaseError(Exception):
    """Raised when a freed ID cannot be returned to the recycling pool.

    The ID is simply never reused; callers log this and carry on.
    """

    def __init__(self, entity_name: str, entity_id: int, reason: str) -> None:
        super().__init__(f"Failed to release ID {entity_id} for '{entity_name}': {reason}")
        self.entity_name = entity_name
        self.entity_id = entity_id


class CounterConflictError(Exception):
    """Raised by a counter store when an atomic update keeps losing races."""
