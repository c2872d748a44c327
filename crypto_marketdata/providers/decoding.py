"""Shape checks used by the provider schema types. Every failure raises DecodingError."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..errors import DecodingError


def require_mapping(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodingError(f"{what}: expected object, got {type(value).__name__}")
    return value


def require_list(value: Any, what: str) -> List[Any]:
    if not isinstance(value, list):
        raise DecodingError(f"{what}: expected array, got {type(value).__name__}")
    return value


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid price
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_float(value: Any, what: str) -> float:
    if not _is_number(value):
        raise DecodingError(f"{what}: expected number, got {value!r}")
    return float(value)


def require_float(obj: Dict[str, Any], key: str, what: str) -> float:
    if key not in obj:
        raise DecodingError(f"{what}: missing '{key}'")
    return to_float(obj[key], f"{what}.{key}")


def optional_float(obj: Dict[str, Any], key: str, what: str) -> Optional[float]:
    """Absent or null -> None; anything else must be a number."""
    value = obj.get(key)
    if value is None:
        return None
    return to_float(value, f"{what}.{key}")


def nullable_float(obj: Dict[str, Any], key: str, what: str) -> float:
    """Key must be present; null reads as 0.0."""
    if key not in obj:
        raise DecodingError(f"{what}: missing '{key}'")
    value = optional_float(obj, key, what)
    return 0.0 if value is None else value


def require_str(obj: Dict[str, Any], key: str, what: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise DecodingError(f"{what}: expected string '{key}', got {value!r}")
    return value


def optional_str(obj: Dict[str, Any], key: str, what: str) -> Optional[str]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodingError(f"{what}: expected string '{key}', got {value!r}")
    return value


def float_map(value: Any, what: str) -> Dict[str, float]:
    mapping = require_mapping(value, what)
    return {str(k): to_float(v, f"{what}.{k}") for k, v in mapping.items()}
