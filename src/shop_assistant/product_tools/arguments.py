"""Lenient readers for model-supplied tool arguments.

Models send numbers as ints, floats or strings and sometimes send explicit
nulls. These helpers normalize such values and return None when a value is
absent or cannot be interpreted.
"""

import math
from typing import Any, Dict, List, Optional


def get_str(arguments: Dict[str, Any], key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_float(arguments: Dict[str, Any], key: str) -> Optional[float]:
    value = arguments.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def get_int(arguments: Dict[str, Any], key: str) -> Optional[int]:
    number = get_float(arguments, key)
    if number is None or number != int(number):
        return None
    return int(number)


def get_int_list(arguments: Dict[str, Any], key: str) -> Optional[List[int]]:
    """Integer list from a JSON array, a single number or a comma-separated string.

    Returns None when the value is absent. Elements that are not integers are dropped.
    """
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        raw = [part for part in value.replace(";", ",").split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        raw = list(value)
    else:
        raw = [value]

    result = []
    for item in raw:
        parsed = get_int({"v": item}, "v")
        if parsed is not None:
            result.append(parsed)
    return result
