from __future__ import annotations

from app.schemas.query import FieldError


class QueryError(Exception):
    status_code = 400
    public_message = "Invalid query"

    def to_payload(self) -> dict:
        return {"error": self.public_message}


class ValidationError(QueryError):
    public_message = "Invalid query parameters"

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        fields = ", ".join(error.field for error in self.errors) or "-"
        super().__init__(f"validation failed for: {fields}")

    def to_payload(self) -> dict:
        return {"error": self.public_message, "details": [error.model_dump() for error in self.errors]}


class InvalidPaginationError(QueryError):
    public_message = "Invalid pagination"

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{error.field}: {error.message}" for error in self.errors))

    def to_payload(self) -> dict:
        return {"error": self.public_message, "details": [error.model_dump() for error in self.errors]}


class SourceExecutionError(QueryError):
    status_code = 502
    public_message = "Data source failed"

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")

    def to_payload(self) -> dict:
        return {"error": self.public_message, "source": self.source}
