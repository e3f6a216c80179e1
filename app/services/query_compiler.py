from __future__ import annotations

import logging

from app.schemas.query import FieldError, QueryDescriptor, QueryIntent, SortKey
from app.services.query_errors import InvalidPaginationError

_LOG = logging.getLogger("app.query")

DEFAULT_TIE_BREAKER = "id"


def check_pagination(page: int, limit: int, max_limit: int) -> None:
    errors: list[FieldError] = []
    if page < 1:
        errors.append(FieldError(field="page", message="must be >= 1", type="pagination"))
    if limit < 1:
        errors.append(FieldError(field="limit", message="must be >= 1", type="pagination"))
    elif limit > max_limit:
        errors.append(FieldError(field="limit", message=f"must be <= {max_limit}", type="pagination"))
    if errors:
        raise InvalidPaginationError(errors)


def total_ordering(sort: tuple[SortKey, ...], tie_breaker: str) -> tuple[SortKey, ...]:
    if sort and sort[-1].field == tie_breaker:
        return sort
    return sort + (SortKey(field=tie_breaker, dir="asc"),)


def compile_query(
    intent: QueryIntent,
    *,
    max_limit: int,
    tie_breaker: str = DEFAULT_TIE_BREAKER,
    paginate: bool = True,
) -> QueryDescriptor:
    """Compile an intent into a deterministic plan.

    The sort always ends in ``tie_breaker`` so identical requests return rows
    in identical order, and the offset/limit window is the last stage.
    """
    check_pagination(intent.page, intent.limit, max_limit)
    descriptor = QueryDescriptor(
        predicates=tuple(intent.filters.values()),
        order_by=total_ordering(intent.sort, tie_breaker),
        offset=(intent.page - 1) * intent.limit if paginate else None,
        limit=intent.limit if paginate else None,
    )
    _LOG.debug("compiled query fingerprint=%s predicates=%d", descriptor.fingerprint(), len(descriptor.predicates))
    return descriptor
