from __future__ import annotations

from typing import Optional


class ServiceError(RuntimeError):
    """Base class for service-layer errors."""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def wrap(cls, exc: "ServiceError") -> "ServiceError":
        """Re-type an error, keeping its message and status code."""
        return cls(str(exc), status_code=exc.status_code)


class ApiError(ServiceError):
    """Non-success response from the remote store; message is its `detail`."""


class NetworkError(ApiError):
    """Transport failure with no parseable server message."""


class AuthError(ServiceError):
    """Bad credentials, duplicate registration, invalid or expired token."""


class SaveError(ServiceError):
    """Saving a recipe failed remotely."""


class UnsaveError(ServiceError):
    """Removing a saved recipe failed remotely."""


class PantryError(ServiceError):
    """Pantry operation failed, or was refused against an unloaded cache."""


class RepoError(ServiceError):
    """Errors from repositories (I/O, parse, schema)."""


class LLMError(ServiceError):
    """Errors from the LLM adapter."""


class CatalogError(ServiceError):
    """Errors from the third-party recipe catalog."""
