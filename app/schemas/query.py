from __future__ import annotations

import hashlib
import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from app.core.config import settings

PredicateKind = Literal["equals", "range", "substring", "set_membership"]
Dir = Literal["asc", "desc"]


class FieldError(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    type: str = "value_error"


class Predicate(BaseModel):
    """One filter condition.

    ``fields`` holds a single column for every kind except ``substring``,
    where the term is matched against each listed column and the matches are
    OR-combined.
    """

    model_config = ConfigDict(frozen=True)

    kind: PredicateKind
    fields: tuple[str, ...]
    value: Any = None
    lower: Any = None
    upper: Any = None
    values: tuple[Any, ...] = ()

    @property
    def field(self) -> str:
        return self.fields[0]

    @model_validator(mode="after")
    def _check_operands(self) -> "Predicate":
        if not self.fields:
            raise ValueError("predicate needs at least one field")
        if self.kind != "substring" and len(self.fields) != 1:
            raise ValueError(f"{self.kind} predicate targets exactly one field")
        if self.kind == "range" and self.lower is None and self.upper is None:
            raise ValueError("range predicate needs a lower or an upper bound")
        if self.kind == "set_membership" and not self.values:
            raise ValueError("set_membership predicate needs at least one value")
        if self.kind == "substring" and not str(self.value or "").strip():
            raise ValueError("substring predicate needs a search term")
        return self


class SortKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    dir: Dir = "asc"


class PageParams(BaseModel):
    """Pagination part shared by every list endpoint.

    Bounds are checked by the query compiler, which knows the per-endpoint
    maximum.
    """

    page: int = 1
    limit: int = settings.QUERY_DEFAULT_LIMIT


class QueryIntent(BaseModel):
    model_config = ConfigDict(frozen=True)

    filters: dict[str, Predicate] = Field(default_factory=dict)
    sort: tuple[SortKey, ...] = ()
    page: int = 1
    limit: int = settings.QUERY_DEFAULT_LIMIT
    content_types: frozenset[str] = frozenset()


class QueryDescriptor(BaseModel):
    """Compiled plan: filters -> sort -> skip(offset) -> take(limit)."""

    model_config = ConfigDict(frozen=True)

    predicates: tuple[Predicate, ...] = ()
    order_by: tuple[SortKey, ...] = ()
    offset: int | None = None
    limit: int | None = None

    @property
    def is_paginated(self) -> bool:
        return self.limit is not None

    def unpaginated(self) -> "QueryDescriptor":
        return self.model_copy(update={"offset": None, "limit": None})

    def canonical_json(self) -> str:
        return self.model_dump_json()

    def fingerprint(self) -> str:
        return hashlib.sha256(self.canonical_json().encode("utf-8")).hexdigest()


class PagedResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    rows: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20
    failed_sources: tuple[str, ...] = ()

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @model_validator(mode="after")
    def _check_window(self) -> "PagedResult":
        if len(self.rows) > self.limit:
            raise ValueError("page holds more rows than its limit")
        return self

    def to_response(self) -> dict[str, Any]:
        pagination: dict[str, Any] = {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }
        if self.failed_sources:
            pagination["failed_sources"] = list(self.failed_sources)
        return {"data": self.rows, "pagination": pagination}
