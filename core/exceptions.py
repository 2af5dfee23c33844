from typing import Dict, List, Optional


class AppError(Exception):
    """Base class for errors that are reported to the API caller."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(e["message"] for e in errors) or self.default_message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> dict:
        return {"errors": self.errors}


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Not authorized"


class StoreError(AppError):
    """Persistence failure. The detail is logged, never returned."""

    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(self.default_message)
