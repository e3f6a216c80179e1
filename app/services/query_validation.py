from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import QueryParams

from app.schemas.query import FieldError
from app.services.query_errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def raw_params(query_params: QueryParams | Mapping[str, Any]) -> dict[str, Any]:
    """Flatten request query parameters; repeated keys become lists."""
    if isinstance(query_params, QueryParams):
        out: dict[str, Any] = {}
        for key in query_params.keys():
            values = query_params.getlist(key)
            out[key] = values if len(values) > 1 else values[0]
        return out
    return dict(query_params)


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "__root__"


def validate_params(schema: type[M], raw: Mapping[str, Any]) -> M:
    """Coerce ``raw`` into ``schema`` or raise one error entry per bad field.

    Blank strings count as absent so declared defaults apply.
    """
    data = {key: value for key, value in raw.items() if not _is_blank(value)}
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            FieldError(field=_field_name(tuple(err.get("loc") or ())), message=err.get("msg", ""), type=err.get("type", ""))
            for err in exc.errors()
        ]
        raise ValidationError(errors) from exc


def split_csv(value: Any) -> Any:
    # For set-membership params: "a,b" and repeated keys both yield a list.
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, list):
        out: list[Any] = []
        for item in value:
            out.extend(split_csv(item) if isinstance(item, str) else [item])
        return out
    return value
