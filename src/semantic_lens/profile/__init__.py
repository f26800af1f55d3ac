"""Profile stage.

Per-column type inference, quality scoring and tabular profiling. Bad data
never fails a profile; it lowers the score and shows up as quality issues.
"""

from .quality import QualityResult, score_column_quality
from .tabular import compute_numeric_stats, profile_tabular_data
from .types import infer_column_type

__all__ = [
    "QualityResult",
    "compute_numeric_stats",
    "infer_column_type",
    "profile_tabular_data",
    "score_column_quality",
]
