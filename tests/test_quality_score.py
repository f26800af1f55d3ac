from __future__ import annotations

import pytest

from semantic_lens.config import QualitySettings
from semantic_lens.models import ColumnType, Severity
from semantic_lens.profile import compute_numeric_stats, score_column_quality


def _score(values: list, data_type: ColumnType, *, with_stats: bool = False):
    non_null = [v for v in values if v is not None and v != ""]
    unique = len({str(v) for v in non_null})
    kwargs = {}
    if with_stats:
        stats = compute_numeric_stats(non_null)
        assert stats is not None
        kwargs = {"mean": stats.mean, "std_dev": stats.std_dev}
    return score_column_quality(
        values,
        data_type,
        unique_count=unique,
        null_count=len(values) - len(non_null),
        total_count=len(values),
        **kwargs,
    )


def _types(result) -> list[str]:
    return [i.type for i in result.issues]


def test_mostly_null_column_scores_low_completeness_with_error() -> None:
    values = ["a"] + [None] * 9
    result = _score(values, ColumnType.STRING)

    # completeness 40 * 0.1 = 4, single distinct value -> consistency 0, validity 30
    assert result.score == 34
    nulls = result.issues[0]
    assert nulls.type == "high_nulls"
    assert nulls.severity == Severity.ERROR
    assert nulls.count == 9
    assert nulls.message == "High null rate: 90.0% missing"
    assert "low_cardinality" in _types(result)


def test_half_missing_is_a_warning_not_an_error() -> None:
    values = ["a", "b", "c", "d", "e", None, None, None, None, None]
    result = _score(values, ColumnType.STRING)

    assert result.score == 80
    assert result.issues[0].type == "high_nulls"
    assert result.issues[0].severity == Severity.WARNING


def test_all_null_and_empty_columns_stay_in_range() -> None:
    all_null = _score([None, None, None], ColumnType.STRING)
    assert all_null.score == 60
    assert _types(all_null) == ["high_nulls"]

    empty = _score([], ColumnType.STRING)
    assert empty.score == 60
    assert empty.issues[0].severity == Severity.ERROR


def test_single_row_is_not_low_cardinality() -> None:
    result = _score(["only"], ColumnType.STRING)
    assert result.score == 100
    assert result.issues == []


def test_constant_column_loses_consistency() -> None:
    result = _score([7, 7, 7, 7], ColumnType.NUMBER, with_stats=True)
    assert result.score == 70
    assert _types(result) == ["low_cardinality"]


def test_outliers_above_five_percent_are_penalized() -> None:
    # one extreme value among 12 sits beyond 3 population std devs
    values = [0] * 11 + [100]
    result = _score(values, ColumnType.NUMBER, with_stats=True)

    assert result.score == 85
    outliers = [i for i in result.issues if i.type == "outliers"]
    assert len(outliers) == 1
    assert outliers[0].count == 1
    assert outliers[0].severity == Severity.INFO


def test_outlier_rate_of_exactly_five_percent_is_tolerated() -> None:
    values = [1] * 19 + [1000]
    stats = compute_numeric_stats(values)
    assert stats is not None
    # population std dev: the value is beyond 3 sigma, but 1/20 is not > 5%
    assert 1000 > stats.mean + 3 * stats.std_dev
    result = _score(values, ColumnType.NUMBER, with_stats=True)
    assert result.score == 100
    assert "outliers" not in _types(result)


def test_outliers_only_checked_with_stats() -> None:
    values = [0] * 11 + [100]
    result = _score(values, ColumnType.NUMBER)
    assert result.score == 100


def test_uneven_case_mix_is_a_format_inconsistency() -> None:
    values = ["ABC"] * 9 + ["abc"] * 2
    result = _score(values, ColumnType.STRING)

    assert result.score == 90
    assert _types(result) == ["format_inconsistency"]


def test_balanced_case_mix_is_fine() -> None:
    values = ["ABC"] * 6 + ["abc"] * 5
    assert _score(values, ColumnType.STRING).score == 100


def test_case_check_needs_more_than_ten_values() -> None:
    values = ["ABC"] * 9 + ["abc"]
    assert _score(values, ColumnType.STRING).score == 100


def test_case_check_only_applies_to_strings() -> None:
    values = ["ABC"] * 9 + ["abc"] * 2
    assert _score(values, ColumnType.MIXED).score == 100


def test_score_rounds_half_up() -> None:
    # completeness 40 * 1/80 = 0.5, consistency 0, validity 30 -> 30.5
    values = ["x"] + [None] * 79
    assert _score(values, ColumnType.STRING).score == 31


def test_custom_weights_are_honoured() -> None:
    cfg = QualitySettings(completeness_weight=50, consistency_weight=25, validity_weight=25)
    result = score_column_quality(
        ["a", "b"], ColumnType.STRING, unique_count=2, null_count=0, total_count=2, settings=cfg
    )
    assert result.score == 100


@pytest.mark.parametrize(
    "values,data_type",
    [
        ([None], ColumnType.STRING),
        ([1], ColumnType.NUMBER),
        ([1, None, 3, None, 1000, -1000], ColumnType.NUMBER),
        (["A", "b", "C", "d", "E", "f", "G", "h", "I", "j", "K", "l"], ColumnType.STRING),
        ([True, False, None], ColumnType.BOOLEAN),
    ],
)
def test_score_is_an_integer_between_0_and_100(values: list, data_type: ColumnType) -> None:
    result = _score(values, data_type, with_stats=data_type == ColumnType.NUMBER)
    assert isinstance(result.score, int)
    assert 0 <= result.score <= 100
