from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..config import QualitySettings
from ..models import ColumnType, QualityIssue, Severity
from ..utils import is_null, round_half_up, stringify, to_number


@dataclass(frozen=True)
class QualityResult:
    score: int
    issues: list[QualityIssue] = field(default_factory=list)


def score_column_quality(
    values: Sequence[Any],
    data_type: ColumnType,
    *,
    unique_count: int,
    null_count: int,
    total_count: int,
    mean: Optional[float] = None,
    std_dev: Optional[float] = None,
    settings: Optional[QualitySettings] = None,
) -> QualityResult:
    """Score one column's data quality on a 0-100 scale.

    The score is the sum of three independently weighted components:

    - completeness (default 40): share of non-null values
    - consistency (default 30): zero for single-valued columns, reduced when
      a numeric column has too many values beyond `outlier_sigma` standard
      deviations from the mean
    - validity (default 30): reduced when a string column mixes all-upper
      and all-lower entries unevenly

    Outlier detection only runs when both `mean` and `std_dev` are given.
    Findings are returned as issues; nothing here raises on bad data.
    """
    cfg = settings or QualitySettings()
    issues: list[QualityIssue] = []

    # 1. Completeness
    completeness_rate = (total_count - null_count) / total_count if total_count > 0 else 0.0
    completeness = completeness_rate * cfg.completeness_weight

    if completeness_rate < cfg.null_warn_rate:
        missing_pct = (1 - completeness_rate) * 100
        issues.append(
            QualityIssue(
                type="high_nulls",
                severity=Severity.ERROR if completeness_rate < cfg.null_error_rate else Severity.WARNING,
                message=f"High null rate: {missing_pct:.1f}% missing",
                count=null_count,
            )
        )

    non_null = [v for v in values if not is_null(v)]

    # 2. Consistency
    if unique_count == 1 and total_count > 1:
        consistency = 0.0
        issues.append(
            QualityIssue(
                type="low_cardinality",
                severity=Severity.WARNING,
                message="All values are identical",
                count=1,
            )
        )
    else:
        consistency = cfg.consistency_weight
        if data_type == ColumnType.NUMBER and mean is not None and std_dev is not None:
            nums = [n for n in (to_number(v) for v in non_null) if n is not None]
            upper = mean + cfg.outlier_sigma * std_dev
            lower = mean - cfg.outlier_sigma * std_dev
            outliers = [n for n in nums if n > upper or n < lower]
            if outliers and len(outliers) / len(nums) > cfg.outlier_rate:
                consistency = max(0.0, consistency - cfg.outlier_penalty)
                issues.append(
                    QualityIssue(
                        type="outliers",
                        severity=Severity.INFO,
                        message=f"{len(outliers)} outliers detected (>{cfg.outlier_sigma:g} std dev)",
                        count=len(outliers),
                    )
                )

    # 3. Validity
    validity = cfg.validity_weight
    if data_type == ColumnType.STRING:
        texts = [stringify(v) for v in non_null]
        has_upper = any(t != t.lower() for t in texts)
        has_lower = any(t != t.upper() for t in texts)
        if has_upper and has_lower and len(texts) > cfg.case_min_values:
            upper_count = sum(1 for t in texts if t == t.upper())
            lower_count = sum(1 for t in texts if t == t.lower())
            if abs(upper_count - lower_count) / len(texts) > cfg.case_rate:
                validity = max(0.0, validity - cfg.case_penalty)
                issues.append(
                    QualityIssue(
                        type="format_inconsistency",
                        severity=Severity.INFO,
                        message="Mixed uppercase/lowercase detected",
                    )
                )

    return QualityResult(score=round_half_up(completeness + consistency + validity), issues=issues)
