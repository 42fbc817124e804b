from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def ensure_dict(x: Any) -> Dict[str, Any]:
    return x if isinstance(x, dict) else {}


def ensure_list(x: Optional[Iterable]) -> List:
    if isinstance(x, (list, tuple)):
        return list(x)
    if x is not None:
        logger.debug("Dropping non-list value %r", x)
    return []


def int_or_none(x: Any) -> Optional[int]:
    """Coerce manifest numbers; anything that is not an integer becomes None."""
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, float) and not x.is_integer():
        logger.debug("Dropping non-integer value %r", x)
        return None
    try:
        return int(x)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Dropping non-integer value %r", x)
        return None


def bool_or_none(x: Any) -> Optional[bool]:
    return x if isinstance(x, bool) else None


def str_or_none(x: Any) -> Optional[str]:
    if x is None or isinstance(x, (dict, list)):
        return None
    return str(x)


def validate_or_none(model: Type[M], data: Any) -> Optional[M]:
    """Validate a manifest fragment, dropping it when it does not fit the model."""
    if not isinstance(data, dict):
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.debug("Dropping %s fragment: %s", model.__name__, exc)
        return None


def validate_list(model: Type[M], items: Any) -> Optional[List[M]]:
    out = [m for m in (validate_or_none(model, i) for i in ensure_list(items)) if m is not None]
    return out or None
