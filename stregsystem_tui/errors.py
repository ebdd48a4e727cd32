"""Error taxonomy shared by the backend clients, settings store and modals."""

from __future__ import annotations


class AppError(Exception):
    """Base class for failures that are shown to the user as text."""

    label = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class StorageError(AppError):
    """Local file access failed."""

    label = "I/O error"


class NetworkError(AppError):
    """The request never produced an HTTP response."""

    label = "Network error"


class ApiError(AppError):
    """A known endpoint answered with a non-2xx status or an unusable payload."""

    label = "API error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(AppError):
    """Persisted settings are invalid."""

    label = "Configuration error"


class InputError(AppError):
    """User-entered text failed local validation."""

    label = "Input error"
