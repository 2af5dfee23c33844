from typing import Dict

from pydantic import BaseModel

from core.exceptions import ValidationError


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _wire_name(data: BaseModel, field: str) -> str:
    info = type(data).model_fields.get(field)
    return info.alias if info is not None and info.alias else field


def require_fields(data: BaseModel, messages: Dict[str, str]):
    """Raise ValidationError listing every required field that is missing or blank."""
    errors = [
        {"field": _wire_name(data, field), "message": message}
        for field, message in messages.items()
        if is_blank(getattr(data, field, None))
    ]
    if errors:
        raise ValidationError(errors)


def reject_blank(data: BaseModel, changes: dict, messages: Dict[str, str]):
    """Partial updates may omit a required field but may not blank it."""
    errors = [
        {"field": _wire_name(data, field), "message": message}
        for field, message in messages.items()
        if field in changes and is_blank(changes[field])
    ]
    if errors:
        raise ValidationError(errors)
