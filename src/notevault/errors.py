"""Exception hierarchy for notevault.

Every error carries a machine-readable ``code`` and an ``http_status`` so the
HTTP layer can render it without knowing the concrete class.  ``NotFoundError``
and ``ValidationError`` are caller mistakes; ``PersistenceError`` is an
infrastructure fault raised by storage backends.
"""

from __future__ import annotations

from typing import Any


class VaultError(Exception):
    """Base class for all notevault errors."""

    code = "VAULT_ERROR"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code}] {self.message} ({detail_str})"
        return f"[{self.code}] {self.message}"


class NotFoundError(VaultError):
    """Raised when a note or template id is absent from the store."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(
            f"{kind.capitalize()} not found.",
            details={"kind": kind, "id": item_id},
        )
        self.kind = kind
        self.item_id = item_id


class ValidationError(VaultError):
    """Raised when a required field is missing or a value is unusable."""

    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class PersistenceError(VaultError):
    """Raised when a storage backend fails to load or save a snapshot."""

    code = "PERSISTENCE_FAILURE"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if path:
            # Only the file name; full paths stay out of responses
            details["path_hint"] = path.replace("\\", "/").rsplit("/", 1)[-1]
        if original_error is not None:
            details["original_error"] = str(original_error)[:200]
        super().__init__(message, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error
