from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import asc, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Query, Session

from app.schemas.query import FieldError, Predicate, QueryDescriptor
from app.services.query_errors import SourceExecutionError, ValidationError

_LOG = logging.getLogger("app.query")


def _bad_filter_value(column_key: str, kind: str) -> ValidationError:
    return ValidationError([FieldError(field=column_key, message=f"invalid {kind} filter value", type=kind)])


def _coerce_bool_filter_value(column_key: str, value):
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off"}:
        return False
    raise _bad_filter_value(column_key, "boolean")


def _coerce_number_filter_value(column_key: str, value, python_type):
    if python_type in {int, float} and isinstance(value, (int, float)) and not isinstance(value, bool):
        return python_type(value)
    if python_type is Decimal and isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        raise _bad_filter_value(column_key, "number")
    try:
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        return Decimal(text)
    except (ValueError, TypeError, InvalidOperation):
        raise _bad_filter_value(column_key, "number")


def _coerce_date_filter_value(column_key: str, value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise _bad_filter_value(column_key, "date")


def _coerce_datetime_filter_value(column_key: str, value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    else:
        text = str(value or "").strip()
        try:
            if "T" not in text and " " not in text and len(text) == 10:
                # Date-only literal for a timestamp column -> start of that day.
                parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise _bad_filter_value(column_key, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except (AttributeError, IndexError, NotImplementedError):
        return None


def coerce_filter_value(column, value):
    if value is None:
        return None
    python_type = _column_python_type(column)
    if python_type is uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value).strip())
        except ValueError:
            raise _bad_filter_value(column.key, "uuid")
    if python_type is bool:
        return _coerce_bool_filter_value(column.key, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number_filter_value(column.key, value, python_type)
    if python_type is datetime:
        return _coerce_datetime_filter_value(column.key, value)
    if python_type is date:
        return _coerce_date_filter_value(column.key, value)
    return value


def _is_date_only_literal(raw_value) -> bool:
    if isinstance(raw_value, date) and not isinstance(raw_value, datetime):
        return True
    if not isinstance(raw_value, str):
        return False
    text = raw_value.strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        return False


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column_or_error(model, field: str, source: str):
    col = getattr(model, field, None)
    if col is None or not hasattr(col, "property"):
        raise SourceExecutionError(source, f'unknown field "{field}"')
    return col


def predicate_clause(model, predicate: Predicate, source: str):
    if predicate.kind == "substring":
        pattern = f"%{_escape_like(str(predicate.value))}%"
        columns = [_column_or_error(model, name, source) for name in predicate.fields]
        return or_(*[col.ilike(pattern, escape="\\") for col in columns])

    col = _column_or_error(model, predicate.field, source)
    if predicate.kind == "equals":
        if predicate.value is None:
            return col.is_(None)
        value = coerce_filter_value(col, predicate.value)
        if _column_python_type(col) is datetime and _is_date_only_literal(predicate.value):
            return (col >= value) & (col < value + timedelta(days=1))
        return col == value
    if predicate.kind == "set_membership":
        return col.in_([coerce_filter_value(col, item) for item in predicate.values])

    clauses = []
    if predicate.lower is not None:
        clauses.append(col >= coerce_filter_value(col, predicate.lower))
    if predicate.upper is not None:
        upper = coerce_filter_value(col, predicate.upper)
        if _column_python_type(col) is datetime and _is_date_only_literal(predicate.upper):
            clauses.append(col < upper + timedelta(days=1))
        else:
            clauses.append(col <= upper)
    clause = clauses[0]
    for extra in clauses[1:]:
        clause = clause & extra
    return clause


def apply_predicates(q: Query, model, descriptor: QueryDescriptor, source: str) -> Query:
    for predicate in descriptor.predicates:
        q = q.filter(predicate_clause(model, predicate, source))
    return q


def apply_ordering(q: Query, model, descriptor: QueryDescriptor, source: str) -> Query:
    for key in descriptor.order_by:
        col = _column_or_error(model, key.field, source)
        q = q.order_by(asc(col) if key.dir == "asc" else desc(col))
    return q


def row_to_dict(row: Any) -> dict[str, Any]:
    mapper = sa_inspect(type(row))
    return {column.key: getattr(row, column.key) for column in mapper.columns}


class SqlAlchemyAdapter:
    """Runs descriptors as ORM queries, one mapped model per source id."""

    def __init__(self, db: Session, models: Mapping[str, type]):
        self.db = db
        self.models = dict(models)

    @classmethod
    def for_specs(cls, db: Session, *specs) -> "SqlAlchemyAdapter":
        return cls(db, {spec.source_id: spec.model for spec in specs})

    def execute(self, descriptor: QueryDescriptor, source: str) -> tuple[list[dict[str, Any]], int]:
        model = self.models.get(source)
        if model is None:
            raise SourceExecutionError(source, "unknown source")
        try:
            filtered = apply_predicates(self.db.query(model), model, descriptor, source)
            total = filtered.count()
            q = apply_ordering(filtered, model, descriptor, source)
            if descriptor.is_paginated:
                q = q.offset(descriptor.offset or 0).limit(descriptor.limit)
            rows = q.all()
        except SQLAlchemyError as exc:
            _LOG.error("source %s query failed: %s", source, exc)
            raise SourceExecutionError(source, exc.__class__.__name__) from exc
        return [row_to_dict(row) for row in rows], int(total)
