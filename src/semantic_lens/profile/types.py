from __future__ import annotations

import re
import warnings
from typing import Any, Sequence

import pandas as pd

from ..models import ColumnType
from ..utils import is_numeric_value, stringify

_DIGIT_RE = re.compile(r"\d")


def _parses_as_date(value: Any) -> bool:
    text = stringify(value)
    # dateutil resolves bare words like "now" or "Jan"; a date needs a digit
    if not _DIGIT_RE.search(text):
        return False
    with warnings.catch_warnings():
        # pandas warns when it has to guess a format per element
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return False
    return not pd.isna(parsed)


def infer_column_type(sample: Sequence[Any], *, mapped: bool = True) -> ColumnType:
    """Classify a sample of non-null column values.

    Unmapped columns are always MIXED. An empty sample yields STRING for a
    mapped column.
    """
    if not mapped:
        return ColumnType.MIXED
    if not sample:
        return ColumnType.STRING

    if all(is_numeric_value(v) for v in sample):
        return ColumnType.NUMBER
    if all(isinstance(v, bool) for v in sample):
        return ColumnType.BOOLEAN
    if all(_parses_as_date(v) for v in sample):
        return ColumnType.DATE
    return ColumnType.STRING
