from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw)
        return v if v > 0 else default
    except ValueError:
        return default


@dataclass(frozen=True)
class QualitySettings:
    """Weights and thresholds of the column quality score."""

    completeness_weight: float = 40.0
    consistency_weight: float = 30.0
    validity_weight: float = 30.0

    # completeness below warn_rate emits high_nulls; below error_rate it is an error
    null_warn_rate: float = 0.8
    null_error_rate: float = 0.5

    outlier_sigma: float = 3.0
    outlier_rate: float = 0.05
    outlier_penalty: float = 15.0

    case_min_values: int = 10
    case_rate: float = 0.3
    case_penalty: float = 10.0


@dataclass(frozen=True)
class ProfileSettings:
    """
    Knobs for the tabular profiler.

    type_sample_size: how many leading non-null values feed type inference
    top_values_limit: top_values is omitted above this many distinct values
    """

    type_sample_size: int = 100
    top_values_limit: int = 1000
    quality: QualitySettings = field(default_factory=QualitySettings)

    @classmethod
    def from_env(cls) -> "ProfileSettings":
        return cls(
            type_sample_size=_env_positive_int("SEMANTIC_LENS_TYPE_SAMPLE_SIZE", 100),
            top_values_limit=_env_positive_int("SEMANTIC_LENS_TOP_VALUES_LIMIT", 1000),
        )


DEFAULT_SETTINGS = ProfileSettings()
