from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from app.core.config import settings
from app.schemas.query import Predicate, PredicateKind, QueryIntent, SortKey

Bound = Literal["lower", "upper"]


@dataclass(frozen=True)
class PredicateBinding:
    kind: PredicateKind
    fields: tuple[str, ...]
    bound: Bound | None = None


def equals(field: str) -> PredicateBinding:
    return PredicateBinding(kind="equals", fields=(field,))


def substring(*fields: str) -> PredicateBinding:
    return PredicateBinding(kind="substring", fields=tuple(fields))


def one_of(field: str) -> PredicateBinding:
    return PredicateBinding(kind="set_membership", fields=(field,))


def at_least(field: str) -> PredicateBinding:
    return PredicateBinding(kind="range", fields=(field,), bound="lower")


def at_most(field: str) -> PredicateBinding:
    return PredicateBinding(kind="range", fields=(field,), bound="upper")


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _range_bounds(binding: PredicateBinding, value: Any) -> tuple[Any, Any]:
    if binding.bound == "lower":
        return value, None
    return None, value


def build_predicates(
    params: BaseModel | Mapping[str, Any],
    bindings: Mapping[str, PredicateBinding],
    *,
    scope: Mapping[str, Any] | None = None,
) -> dict[str, Predicate]:
    """Turn validated params into predicates keyed by the param that produced them.

    ``scope`` adds unconditional equality predicates first (e.g. the owning
    user). Unset params impose no constraint. Range params that share a target
    column collapse into one predicate at the position of the first one.
    """
    values = params if isinstance(params, Mapping) else params.model_dump()
    out: dict[str, Predicate] = {}
    for field, value in (scope or {}).items():
        out[field] = Predicate(kind="equals", fields=(field,), value=value)

    range_keys: dict[str, str] = {}
    for name, binding in bindings.items():
        value = values.get(name)
        if _is_unset(value):
            continue
        if binding.kind == "equals":
            out[name] = Predicate(kind="equals", fields=binding.fields, value=value)
        elif binding.kind == "substring":
            out[name] = Predicate(kind="substring", fields=binding.fields, value=str(value).strip())
        elif binding.kind == "set_membership":
            items = tuple(value) if isinstance(value, (list, tuple, set, frozenset)) else (value,)
            out[name] = Predicate(kind="set_membership", fields=binding.fields, values=tuple(dict.fromkeys(items)))
        elif binding.kind == "range":
            lower, upper = _range_bounds(binding, value)
            if lower is None and upper is None:
                continue
            column = binding.fields[0]
            key = range_keys.get(column)
            if key is None:
                range_keys[column] = name
                out[name] = Predicate(kind="range", fields=binding.fields, lower=lower, upper=upper)
            else:
                current = out[key]
                out[key] = current.model_copy(
                    update={
                        "lower": lower if lower is not None else current.lower,
                        "upper": upper if upper is not None else current.upper,
                    }
                )
    return out


def build_intent(
    params: BaseModel,
    bindings: Mapping[str, PredicateBinding],
    *,
    sort: Iterable[SortKey] = (),
    scope: Mapping[str, Any] | None = None,
    content_types: Iterable[str] = (),
) -> QueryIntent:
    return QueryIntent(
        filters=build_predicates(params, bindings, scope=scope),
        sort=tuple(sort),
        page=getattr(params, "page", 1),
        limit=getattr(params, "limit", settings.QUERY_DEFAULT_LIMIT),
        content_types=frozenset(content_types),
    )
