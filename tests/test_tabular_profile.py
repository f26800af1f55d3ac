from __future__ import annotations

import math

from semantic_lens.config import ProfileSettings
from semantic_lens.models import ColumnMapping, ColumnType, Dataset
from semantic_lens.profile import compute_numeric_stats, infer_column_type, profile_tabular_data


def _dataset(**columns: list) -> Dataset:
    names = list(columns)
    n = len(next(iter(columns.values()))) if columns else 0
    rows = [{c: columns[c][i] for c in names} for i in range(n)]
    return Dataset(columns=names, rows=rows)


def _map(column: str, role: str = "measure", display: str | None = None) -> ColumnMapping:
    return ColumnMapping(source_column=column, role_id=role, display_name=display or column.title())


def test_type_inference_classifies_samples() -> None:
    assert infer_column_type([1, 2.5, -3]) == ColumnType.NUMBER
    assert infer_column_type([True, False]) == ColumnType.BOOLEAN
    assert infer_column_type(["2023-01-01", "2024-02-29"]) == ColumnType.DATE
    assert infer_column_type(["alpha", "beta"]) == ColumnType.STRING
    assert infer_column_type([1, "alpha"]) == ColumnType.STRING


def test_type_inference_edge_cases() -> None:
    # bools are not numbers even though bool subclasses int
    assert infer_column_type([True, 1]) != ColumnType.NUMBER
    assert infer_column_type([]) == ColumnType.STRING
    assert infer_column_type([], mapped=False) == ColumnType.MIXED
    assert infer_column_type([1, 2, 3], mapped=False) == ColumnType.MIXED


def test_word_only_values_are_not_dates() -> None:
    assert infer_column_type(["now", "today"]) == ColumnType.STRING
    assert infer_column_type(["Jan", "Feb", "Mar"]) == ColumnType.STRING
    assert infer_column_type(["tomorrow", "2024-01-01"]) == ColumnType.STRING
    assert infer_column_type(["Jan 5 2024", "2024-02-01"]) == ColumnType.DATE


def test_mapped_profiles_come_first_then_unmapped_in_dataset_order() -> None:
    ds = _dataset(a=[1, 2], b=["x", "y"], c=[True, False], d=[3, 4])
    profiles = profile_tabular_data(ds, [_map("d"), _map("b", "category")])

    assert [p.column for p in profiles] == ["d", "b", "a", "c"]
    assert [p.display_name for p in profiles] == ["D", "B", "a", "c"]
    assert profiles[2].data_type == ColumnType.MIXED
    assert profiles[3].data_type == ColumnType.MIXED


def test_numeric_stats_use_population_std_and_upper_middle_median() -> None:
    stats = compute_numeric_stats([4, 1, 3, 2])
    assert stats is not None
    assert stats.min == 1
    assert stats.max == 4
    assert stats.mean == 2.5
    # index n // 2 of the sorted values, not the average of the two middles
    assert stats.median == 3
    assert math.isclose(stats.std_dev, math.sqrt(1.25))


def test_numeric_stats_drop_unparseable_values() -> None:
    stats = compute_numeric_stats([5, "n/a", "7"])
    assert stats is not None
    assert (stats.min, stats.max, stats.median) == (5, 7, 7)
    assert compute_numeric_stats(["n/a"]) is None
    assert compute_numeric_stats([]) is None


def test_counts_and_top_values() -> None:
    ds = _dataset(city=["oslo", "lima", "oslo", None, "lima", "rome", ""])
    (profile,) = profile_tabular_data(ds, [_map("city", "category")])

    assert profile.data_type == ColumnType.STRING
    assert profile.total_count == 7
    assert profile.null_count == 2
    assert profile.unique_count == 3
    # ties keep first-occurrence order
    assert [(v.value, v.count) for v in profile.top_values or []] == [("oslo", 2), ("lima", 2), ("rome", 1)]
    assert profile.numeric_stats is None


def test_top_values_are_uncapped_but_omitted_above_limit() -> None:
    ds = _dataset(code=[f"c{i}" for i in range(25)])
    (profile,) = profile_tabular_data(ds, [_map("code", "category")])
    assert profile.top_values is not None
    assert len(profile.top_values) == 25

    small = ProfileSettings(top_values_limit=10)
    (profile,) = profile_tabular_data(ds, [_map("code", "category")], settings=small)
    assert profile.top_values is None
    assert profile.unique_count == 25


def test_integral_floats_and_ints_share_a_value_key() -> None:
    ds = _dataset(n=[1, 1.0, 2])
    (profile,) = profile_tabular_data(ds, [_map("n")])
    assert profile.unique_count == 2
    assert profile.top_values is not None
    assert profile.top_values[0].value == "1"
    assert profile.top_values[0].count == 2


def test_type_is_inferred_from_the_leading_sample_only() -> None:
    ds = _dataset(v=[1, 2, "oops"])
    (profile,) = profile_tabular_data(ds, [_map("v")], settings=ProfileSettings(type_sample_size=2))

    assert profile.data_type == ColumnType.NUMBER
    assert profile.numeric_stats is not None
    assert profile.numeric_stats.max == 2


def test_mapped_numeric_column_gets_outlier_check_but_unmapped_does_not() -> None:
    values = [0] * 11 + [100]
    ds = _dataset(mapped=values, unmapped=list(values))
    mapped, unmapped = profile_tabular_data(ds, [_map("mapped")])

    assert mapped.data_type == ColumnType.NUMBER
    assert mapped.numeric_stats is not None
    assert "outliers" in [i.type for i in mapped.quality_issues]
    assert mapped.quality_score == 85

    assert unmapped.numeric_stats is None
    assert unmapped.quality_issues == []
    assert unmapped.quality_score == 100


def test_all_null_mapped_column_profiles_as_string() -> None:
    ds = _dataset(empty=[None, None, ""], other=[1, 2, 3])
    profiles = profile_tabular_data(ds, [_map("empty")])

    assert profiles[0].data_type == ColumnType.STRING
    assert profiles[0].null_count == 3
    assert profiles[0].unique_count == 0
    assert profiles[0].top_values == []
    assert 0 <= profiles[0].quality_score <= 100


def test_boolean_and_date_columns() -> None:
    ds = _dataset(flag=[True, False, True], when=["2024-01-01", "2024-01-02", None])
    flag, when = profile_tabular_data(ds, [_map("flag"), _map("when", "timestamp")])

    assert flag.data_type == ColumnType.BOOLEAN
    assert [v.value for v in flag.top_values or []] == ["true", "false"]
    assert when.data_type == ColumnType.DATE
    assert when.null_count == 1


def test_rows_missing_a_key_count_as_null() -> None:
    ds = Dataset(columns=["a"], rows=[{"a": 1}, {}, {"a": 3}])
    (profile,) = profile_tabular_data(ds, [_map("a")])
    assert profile.total_count == 3
    assert profile.null_count == 1


def test_profiling_is_deterministic() -> None:
    ds = _dataset(a=["x", "Y", None, "x"], b=[3, 1, 2, 2])
    mappings = [_map("b")]
    assert profile_tabular_data(ds, mappings) == profile_tabular_data(ds, mappings)
