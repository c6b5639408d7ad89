"""Error taxonomy shared by the entity services."""
from __future__ import annotations


class ServiceError(Exception):
    """Base exception for entity service workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateError(ServiceError):
    """Raised when a unique field is already used by another entity."""

    field = ""


class DuplicateTitleError(DuplicateError):
    field = "title"

    def __init__(self, message: str = "Title already taken"):
        super().__init__(message)


class DuplicateEmailError(DuplicateError):
    field = "email"

    def __init__(self, message: str = "Email already taken"):
        super().__init__(message)


class DuplicateUsernameError(DuplicateError):
    field = "username"

    def __init__(self, message: str = "Username already taken"):
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when an operation targets an id/slug with no live entity."""
