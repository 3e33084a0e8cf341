from __future__ import annotations

from .constants import CR_CONN_HOST_ERROR, ER_DUP_ENTRY, ER_NO_REFERENCED_ROW_2


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an entity is absent in the queried store."""


class RemoteError(DomainError):
    """Transport or validation failure reported by the remote store.

    ``code`` carries the MySQL error number so callers can tell uniqueness and
    foreign-key violations apart from connectivity problems.
    """

    def __init__(self, code: int | None, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def is_unique_violation(self) -> bool:
        return self.code == ER_DUP_ENTRY

    @property
    def is_foreign_key_violation(self) -> bool:
        return self.code == ER_NO_REFERENCED_ROW_2

    @property
    def is_unreachable(self) -> bool:
        return self.code == CR_CONN_HOST_ERROR

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.code is not None else self.message


class LocalFallbackUsed(UserWarning):
    """Signal (never raised) that a write degraded to local-only storage.

    Records written this way are not visible to other clients of the remote store.
    """
