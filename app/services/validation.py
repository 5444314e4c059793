"""Validation boundary for service entry points.

Payloads arrive either as already-parsed schema objects (from the HTTP layer)
or as plain mappings (scripts, tests). Either way they are turned into a
validated schema instance here, before any session is opened, and pydantic
failures are reported as the domain ``ValidationError``.
"""
import math
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.schemas.common import ResourceAssignment, ensure_unique_resources

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_assignments_adapter = TypeAdapter(List[ResourceAssignment])


def format_errors(errors) -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts into ``[{"param", "msg"}]`` entries"""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        formatted.append({
            "param": ".".join(loc) or None,
            "msg": error.get("msg", "Invalid value"),
        })
    return formatted


def validate_payload(schema: Type[SchemaT], data: Union[SchemaT, BaseModel, Mapping[str, Any]]) -> SchemaT:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(errors=format_errors(exc.errors())) from exc


def validate_assignments(resources) -> List[ResourceAssignment]:
    """Normalise a resource membership list (ids or ``{id, assigned_hours}`` objects)"""
    if resources is None:
        return []
    items = []
    for item in resources:
        if isinstance(item, ResourceAssignment):
            items.append(item.model_dump())
        elif isinstance(item, int) and not isinstance(item, bool):
            items.append({"id": item})
        else:
            items.append(item)
    try:
        return ensure_unique_resources(_assignments_adapter.validate_python(items))
    except PydanticValidationError as exc:
        raise ValidationError(errors=format_errors(
            [{**e, "loc": ("resources",) + tuple(e["loc"])} for e in exc.errors()]
        )) from exc
    except ValueError as exc:
        raise ValidationError(errors=[{"param": "resources", "msg": str(exc)}]) from exc


def require_non_negative(field: str, value: Any, maximum: Optional[float] = None) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(errors=[{"param": field, "msg": f"{field} must be a number"}])
    if not math.isfinite(number) or number < 0:
        raise ValidationError(errors=[{"param": field, "msg": f"{field} must be a non-negative number"}])
    if maximum is not None and number > maximum:
        raise ValidationError(errors=[{"param": field, "msg": f"{field} must not exceed {maximum}"}])
    return number
