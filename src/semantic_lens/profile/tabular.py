from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Optional, Sequence

import pandas as pd

from ..config import ProfileSettings
from ..models import ColumnMapping, ColumnType, Dataset, NumericStats, TabularProfile, ValueCount
from ..utils import is_null, stringify, to_number
from .quality import score_column_quality
from .types import infer_column_type

logger = logging.getLogger(__name__)


def profile_tabular_data(
    dataset: Dataset,
    mappings: Sequence[ColumnMapping],
    settings: Optional[ProfileSettings] = None,
) -> list[TabularProfile]:
    """Profile every column of the dataset.

    Mapped columns come first, in mapping order, with full type inference and
    numeric stats. Unmapped columns follow in dataset column order and are
    profiled as MIXED without numeric stats.
    """
    cfg = settings or ProfileSettings()
    profiles: list[TabularProfile] = []

    for mapping in mappings:
        profiles.append(
            _profile_column(
                dataset.column_values(mapping.source_column),
                column=mapping.source_column,
                display_name=mapping.display_name,
                mapped=True,
                settings=cfg,
            )
        )

    mapped_columns = {m.source_column for m in mappings}
    for column in dataset.columns:
        if column in mapped_columns:
            continue
        profiles.append(
            _profile_column(
                dataset.column_values(column),
                column=column,
                display_name=column,
                mapped=False,
                settings=cfg,
            )
        )

    logger.debug(
        "Profiled %d columns (%d mapped) over %d rows",
        len(profiles),
        len(mappings),
        len(dataset.rows),
    )
    return profiles


def _profile_column(
    values: list[Any],
    *,
    column: str,
    display_name: str,
    mapped: bool,
    settings: ProfileSettings,
) -> TabularProfile:
    non_null = [v for v in values if not is_null(v)]
    null_count = len(values) - len(non_null)

    # Counter keeps first-occurrence order, which breaks count ties below.
    counts = Counter(stringify(v) for v in non_null)
    unique_count = len(counts)

    data_type = infer_column_type(non_null[: settings.type_sample_size], mapped=mapped)

    top_values: Optional[list[ValueCount]] = None
    if unique_count <= settings.top_values_limit:
        ranked = sorted(counts.items(), key=lambda kv: -kv[1])
        top_values = [ValueCount(value=v, count=c) for v, c in ranked]

    numeric_stats: Optional[NumericStats] = None
    if data_type == ColumnType.NUMBER:
        numeric_stats = compute_numeric_stats(non_null)

    quality = score_column_quality(
        values,
        data_type,
        unique_count=unique_count,
        null_count=null_count,
        total_count=len(values),
        mean=numeric_stats.mean if numeric_stats else None,
        std_dev=numeric_stats.std_dev if numeric_stats else None,
        settings=settings.quality,
    )

    return TabularProfile(
        column=column,
        display_name=display_name,
        data_type=data_type,
        null_count=null_count,
        unique_count=unique_count,
        total_count=len(values),
        top_values=top_values,
        numeric_stats=numeric_stats,
        quality_score=quality.score,
        quality_issues=quality.issues,
    )


def compute_numeric_stats(values: Sequence[Any]) -> Optional[NumericStats]:
    """Min, max, mean, median and population std dev of the numeric values.

    The median is the element at index n // 2 of the sorted values, so an
    even-length input yields the upper of the two middle elements. Values
    that do not coerce to a number are dropped; None if nothing is left.
    """
    nums = sorted(n for n in (to_number(v) for v in values) if n is not None)
    if not nums:
        return None

    s = pd.Series(nums, dtype="float64")
    return NumericStats(
        min=nums[0],
        max=nums[-1],
        mean=float(s.mean()),
        median=nums[len(nums) // 2],
        std_dev=float(s.std(ddof=0)),
    )
