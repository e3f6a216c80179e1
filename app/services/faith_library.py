from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from app.models.azkar import Azkar
from app.models.dua import Dua
from app.models.hadith import Hadith
from app.models.quran_verse import QuranVerse
from app.schemas.faith import FaithSearchParams
from app.schemas.query import PagedResult, SortKey
from app.services.query_aggregator import SOURCE_KEY, ResultAggregator
from app.services.query_predicates import equals, substring
from app.services.query_sources import SourceSpec, describe, run_query
from app.services.universal_query import SqlAlchemyAdapter

QURAN_SOURCE = SourceSpec(
    source_id="quran",
    model=QuranVerse,
    bindings={
        "search": substring("ayah_text_english", "ayah_text_arabic", "surah_name_english"),
        "surah_number": equals("surah_number"),
        "juz_number": equals("juz_number"),
    },
    default_sort=(SortKey(field="surah_number"), SortKey(field="ayah_number")),
)

HADITH_SOURCE = SourceSpec(
    source_id="hadith",
    model=Hadith,
    bindings={
        "search": substring("hadith_text_english", "hadith_text_arabic", "narrator"),
        "collection": equals("collection"),
        "grade": equals("grade"),
    },
    default_sort=(SortKey(field="collection"), SortKey(field="hadith_number")),
)

DUAS_SOURCE = SourceSpec(
    source_id="duas",
    model=Dua,
    bindings={
        "search": substring("title", "dua_english", "dua_arabic", "category"),
        "category": equals("category"),
    },
    default_sort=(SortKey(field="category"), SortKey(field="title")),
)

LIBRARY_SOURCES = {spec.source_id: spec for spec in (QURAN_SOURCE, HADITH_SOURCE, DUAS_SOURCE)}

_BOOKMARK_MODELS = {
    "quran": QuranVerse,
    "hadith": Hadith,
    "dua": Dua,
    "azkar": Azkar,
}


def search_library(db: Session, params: FaithSearchParams, *, aggregator: ResultAggregator | None = None) -> PagedResult:
    adapter = SqlAlchemyAdapter.for_specs(db, *LIBRARY_SOURCES.values())
    if params.content_type != "all":
        spec = LIBRARY_SOURCES[params.content_type]
        result = run_query(adapter, spec, params)
        return result.model_copy(update={"rows": [{**row, SOURCE_KEY: spec.source_id} for row in result.rows]})

    plans = {source: describe(spec, params) for source, spec in LIBRARY_SOURCES.items()}
    aggregator = aggregator or ResultAggregator()
    return aggregator.aggregate(adapter, plans, page=params.page, limit=params.limit)


def content_exists(db: Session, bookmark_type: str, reference_id: uuid.UUID) -> bool:
    model = _BOOKMARK_MODELS.get(bookmark_type)
    if model is None:
        return False
    return db.query(model.id).filter(model.id == reference_id).first() is not None
