from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Protocol

from pydantic import BaseModel

from app.schemas.query import PagedResult, Predicate, QueryDescriptor, SortKey
from app.services.query_compiler import DEFAULT_TIE_BREAKER, compile_query
from app.services.query_errors import SourceExecutionError
from app.services.query_predicates import PredicateBinding, build_intent


class SourceAdapter(Protocol):
    def execute(self, descriptor: QueryDescriptor, source: str) -> tuple[list[dict[str, Any]], int]:
        ...


@dataclass(frozen=True)
class SourceSpec:
    source_id: str
    bindings: Mapping[str, PredicateBinding]
    default_sort: tuple[SortKey, ...]
    tie_breaker: str = DEFAULT_TIE_BREAKER
    max_limit: int = 100
    model: type | None = field(default=None, compare=False)


def describe(
    spec: SourceSpec,
    params: BaseModel,
    *,
    scope: Mapping[str, Any] | None = None,
    sort: Iterable[SortKey] | None = None,
    paginate: bool = True,
    max_limit: int | None = None,
) -> QueryDescriptor:
    intent = build_intent(
        params,
        spec.bindings,
        sort=spec.default_sort if sort is None else sort,
        scope=scope,
        content_types=(spec.source_id,),
    )
    return compile_query(
        intent,
        max_limit=max_limit if max_limit is not None else spec.max_limit,
        tie_breaker=spec.tie_breaker,
        paginate=paginate,
    )


def run_query(
    adapter: SourceAdapter,
    spec: SourceSpec,
    params: BaseModel,
    *,
    scope: Mapping[str, Any] | None = None,
    max_limit: int | None = None,
) -> PagedResult:
    descriptor = describe(spec, params, scope=scope, max_limit=max_limit)
    rows, total = adapter.execute(descriptor, spec.source_id)
    return PagedResult(rows=rows, total=total, page=params.page, limit=params.limit)


def _sort_value(value: Any) -> tuple[bool, Any]:
    # None sorts after every value in ascending order.
    return value is None, value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def row_matches(row: Mapping[str, Any], predicate: Predicate) -> bool:
    if predicate.kind == "substring":
        term = str(predicate.value).lower()
        return any(term in _text(row.get(name)).lower() for name in predicate.fields)
    value = row.get(predicate.field)
    if predicate.kind == "equals":
        return value == predicate.value
    if predicate.kind == "set_membership":
        return value in predicate.values
    if value is None:
        return False
    if isinstance(value, datetime) and type(predicate.lower or predicate.upper) is date:
        value = value.date()
    if predicate.lower is not None and value < predicate.lower:
        return False
    if predicate.upper is not None and value > predicate.upper:
        return False
    return True


def sort_rows(rows: list[dict[str, Any]], order_by: Sequence[SortKey]) -> list[dict[str, Any]]:
    ordered = list(rows)
    for key in reversed(order_by):
        ordered.sort(key=lambda row: _sort_value(row.get(key.field)), reverse=key.dir == "desc")
    return ordered


class InMemoryAdapter:
    """Adapter over plain row mappings, one list per source."""

    def __init__(self, tables: Mapping[str, Sequence[Mapping[str, Any]]]):
        self._tables = {name: [dict(row) for row in rows] for name, rows in tables.items()}

    def execute(self, descriptor: QueryDescriptor, source: str) -> tuple[list[dict[str, Any]], int]:
        rows = self._tables.get(source)
        if rows is None:
            raise SourceExecutionError(source, "unknown source")
        try:
            matched = [row for row in rows if all(row_matches(row, p) for p in descriptor.predicates)]
            ordered = sort_rows(matched, descriptor.order_by)
        except TypeError as exc:
            raise SourceExecutionError(source, str(exc)) from exc
        total = len(ordered)
        if descriptor.is_paginated:
            start = descriptor.offset or 0
            ordered = ordered[start : start + descriptor.limit]
        return [dict(row) for row in ordered], total
