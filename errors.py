"""
Error taxonomy shared by the stores, the notifier and the route handlers.

Every error knows the HTTP status it maps to; main.py renders them in one
exception handler.
"""
from typing import Dict, List, Optional


class AppError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message}


class ValidationError(AppError):
    status_code = 400
    public_message = "Invalid input"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message, "errors": self.errors}


class NotFoundError(AppError):
    status_code = 404
    public_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    public_message = "Conflict"


class UnauthorizedError(AppError):
    status_code = 401
    public_message = "Unauthorized"


class StoreError(AppError):
    """Persistence call failed for reasons this layer cannot act on."""

    status_code = 500
    public_message = "Storage unavailable"


class NotifyError(AppError):
    """Outbound notification failed; 400 when unconfigured, 500 otherwise."""

    status_code = 500
    public_message = "Failed to notify"
