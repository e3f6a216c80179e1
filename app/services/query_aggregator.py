from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from app.core.config import settings
from app.schemas.query import PagedResult, QueryDescriptor
from app.services.query_compiler import check_pagination
from app.services.query_errors import SourceExecutionError
from app.services.query_sources import SourceAdapter

_LOG = logging.getLogger("app.query")

SOURCE_KEY = "content_type"


def _by_source(row: dict[str, Any]) -> Any:
    return row[SOURCE_KEY]


class ResultAggregator:
    """Merge per-source results into one page.

    Every source is read without a window, rows are tagged with their source
    id, merged, re-sorted by ``merge_key`` and only then sliced. The sort is
    stable, so rows that tie on ``merge_key`` keep each source's own order.

    With ``skip_failed_sources`` a failing source is left out of the page and
    of ``total`` and reported in ``failed_sources``; otherwise its
    ``SourceExecutionError`` propagates.
    """

    def __init__(
        self,
        *,
        skip_failed_sources: bool | None = None,
        merge_key: Callable[[dict[str, Any]], Any] = _by_source,
        max_limit: int | None = None,
    ):
        if skip_failed_sources is None:
            skip_failed_sources = settings.QUERY_SKIP_FAILED_SOURCES
        self.skip_failed_sources = bool(skip_failed_sources)
        self.merge_key = merge_key
        self.max_limit = max_limit if max_limit is not None else settings.QUERY_MAX_LIMIT

    def aggregate(
        self,
        adapter: SourceAdapter,
        plans: Mapping[str, QueryDescriptor],
        *,
        page: int,
        limit: int,
    ) -> PagedResult:
        check_pagination(page, limit, self.max_limit)
        merged: list[dict[str, Any]] = []
        total = 0
        failed: list[str] = []
        for source in sorted(plans):
            try:
                rows, count = adapter.execute(plans[source].unpaginated(), source)
            except SourceExecutionError as exc:
                if not self.skip_failed_sources:
                    raise
                _LOG.warning("source %s skipped in merged query: %s", source, exc)
                failed.append(source)
                continue
            merged.extend({**row, SOURCE_KEY: source} for row in rows)
            total += int(count)
        merged.sort(key=self.merge_key)
        offset = (page - 1) * limit
        return PagedResult(
            rows=merged[offset : offset + limit],
            total=total,
            page=page,
            limit=limit,
            failed_sources=tuple(failed),
        )
