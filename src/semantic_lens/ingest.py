from __future__ import annotations

import io
import json
import logging
import math
import re
from pathlib import Path
from typing import Any

import pandas as pd

from .models import Dataset, SourceType

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_TRUE = {"true", "TRUE", "True"}
_FALSE = {"false", "FALSE", "False"}


class DatasetParseError(ValueError):
    """Raised when raw CSV/JSON text cannot be turned into rows."""


def _coerce_cell(value: Any) -> Any:
    """
    Per-cell typing on top of the column dtype pandas picked.

    A column mixing "12" and "n/a" stays object in pandas; we still want the
    numeric cells as numbers and "true"/"false" as booleans.
    """
    if isinstance(value, float) and math.isnan(value):
        return None
    if not isinstance(value, str):
        return value
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    if _NUMBER_RE.match(value):
        s = value.strip()
        if re.fullmatch(r"-?\d+", s):
            return int(s)
        return float(s)
    return value


def _frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    columns = [str(c) for c in df.columns]
    cells: dict[str, list[Any]] = {}
    for name, col in zip(columns, df.columns):
        # tolist() yields native Python scalars; NaN marks empty cells
        cells[name] = [_coerce_cell(v) for v in df[col].tolist()]
    return [{name: cells[name][i] for name in columns} for i in range(int(df.shape[0]))]


def parse_csv(raw: str, file_name: str | None = None) -> Dataset:
    """Parse CSV text with a header row into a Dataset.

    Cells are typed the way a spreadsheet would: numbers and true/false become
    numbers and booleans, empty cells become None, blank lines are skipped.
    Literal strings such as "NA" or "null" are kept as text.
    """
    try:
        df = pd.read_csv(
            io.StringIO(raw),
            skip_blank_lines=True,
            keep_default_na=False,
            na_values=[""],
        )
    except pd.errors.EmptyDataError as e:
        raise DatasetParseError("CSV input is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DatasetParseError(f"CSV input could not be parsed: {e}") from e

    rows = _frame_to_rows(df)
    logger.debug("Parsed CSV %s: %d rows x %d columns", file_name or "<text>", len(rows), df.shape[1])
    return Dataset(
        columns=[str(c) for c in df.columns],
        rows=rows,
        source_type=SourceType.CSV,
        file_name=file_name,
    )


def parse_json(raw: str, file_name: str | None = None) -> Dataset:
    """Parse a JSON array of objects (or a single object) into a Dataset.

    Columns are taken from the keys of the first object.
    """
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DatasetParseError(f"JSON input is not valid JSON: {e}") from e

    data = parsed if isinstance(parsed, list) else [parsed]
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise DatasetParseError(f"JSON record [{i}] must be an object.")

    columns = [str(k) for k in data[0].keys()] if data else []
    logger.debug("Parsed JSON %s: %d rows x %d columns", file_name or "<text>", len(data), len(columns))
    return Dataset(columns=columns, rows=data, source_type=SourceType.JSON, file_name=file_name)


def parse_file(file_name: str, raw: str) -> Dataset:
    """Dispatch on extension: .json is JSON, everything else is CSV."""
    if Path(file_name).suffix.lower() == ".json":
        return parse_json(raw, file_name=file_name)
    return parse_csv(raw, file_name=file_name)


def load_dataset(path: Path) -> Dataset:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    return parse_file(path.name, path.read_text(encoding="utf-8"))
