from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Optional

from .models import ColumnTransform


def is_null(value: Any) -> bool:
    """None, NaN and the empty string are all treated as missing."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def stringify(value: Any) -> str:
    """
    Stable text form of a cell value, used for ids, keys and value counts.

    Booleans render lowercase and integral floats drop their fractional part,
    so 1, 1.0 and "1" all produce the same key. Nulls render as "".
    """
    if is_null(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """
    Lenient numeric coercion.

    Returns None when the value is null or does not parse; booleans count as
    1/0 and blank strings as 0.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        f = float(value)
        return None if math.isnan(f) else f
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            return 0.0
        if "_" in s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
        return None if math.isnan(f) else f
    return None


def is_numeric_value(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def apply_transform(text: str, transform: ColumnTransform) -> str:
    if transform == ColumnTransform.UPPERCASE:
        return text.upper()
    if transform == ColumnTransform.LOWERCASE:
        return text.lower()
    if transform == ColumnTransform.TRIM:
        return text.strip()
    return text


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False), encoding="utf-8")
