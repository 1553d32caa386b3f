from models.common_models import Dataset
from services.profile_service import classify_values, is_numeric_value, is_temporal, profile_dataset


def _dataset(values, name="v"):
    return Dataset.from_records([{name: v} for v in values])


def test_fallback_profiles(fallback):
    profiles = profile_dataset(fallback)

    assert list(profiles) == ["state", "men", "women", "children", "other", "total"]

    state = profiles["state"]
    assert not state.is_numerical
    assert state.classified_as_categorical
    assert not state.classified_as_numerical_candidate

    for name in ["men", "women", "children", "other", "total"]:
        p = profiles[name]
        assert p.is_numerical
        assert not p.is_temporal
        assert p.unique_value_count == 3
        # Few distinct values: eligible for both axes
        assert p.classified_as_categorical
        assert p.classified_as_numerical_candidate


def test_profile_is_deterministic(fallback):
    assert profile_dataset(fallback) == profile_dataset(fallback)


def test_ten_distinct_numbers_are_categorical():
    profile = profile_dataset(_dataset(list(range(1, 11))))["v"]
    assert profile.unique_value_count == 10
    assert profile.classified_as_categorical
    assert profile.classified_as_numerical_candidate


def test_eleven_distinct_numbers_are_not_categorical():
    profile = profile_dataset(_dataset(list(range(1, 12))))["v"]
    assert profile.unique_value_count == 11
    assert not profile.is_temporal
    assert not profile.classified_as_categorical
    assert profile.classified_as_numerical_candidate


def test_unique_count_uses_coerced_values():
    # 1 and 1.0 are the same number; "1" text stays distinct
    assert classify_values([1, 1.0, 2]).unique_value_count == 2
    assert classify_values([1, "1"]).unique_value_count == 2


def test_missing_values_are_not_counted():
    dataset = Dataset.from_records([{"a": 1, "b": "x"}, {"a": 2}, {"a": 3, "b": "x"}])
    profile = profile_dataset(dataset)["b"]
    assert profile.unique_value_count == 1
    assert not profile.is_numerical


def test_mixed_field_is_not_numerical():
    c = classify_values([1, 2, "n/a"])
    assert not c.is_numerical
    assert c.is_categorical


def test_text_dates_are_temporal():
    dates = [f"2024-01-{d:02d}" for d in range(1, 21)]
    profile = profile_dataset(_dataset(dates))["v"]
    assert profile.is_temporal
    assert profile.unique_value_count == 20
    assert profile.classified_as_categorical
    assert not profile.classified_as_numerical_candidate


def test_mixed_date_formats_are_temporal():
    assert is_temporal(["2024-01-15", "03/15/2024", "15 Mar 2024", "2024-01-15 08:30:00"])


def test_text_is_not_temporal():
    assert not is_temporal(["California", "2024-01-15"])


def test_compact_numeric_dates_count_as_temporal():
    # Known heuristic: large integers shaped like YYYYMMDD are read as dates,
    # which makes a high-cardinality numeric field categorical
    values = [20240101 + d for d in range(15)]
    profile = profile_dataset(_dataset(values))["v"]
    assert profile.is_numerical
    assert profile.is_temporal
    assert profile.unique_value_count == 15
    assert profile.classified_as_categorical


def test_is_numeric_value():
    assert is_numeric_value(3)
    assert is_numeric_value(2.5)
    assert not is_numeric_value("3")
    assert not is_numeric_value(None)
    assert not is_numeric_value(True)
    assert not is_numeric_value(float("nan"))


def test_epoch_timestamps_count_as_temporal():
    # Unix seconds, one per day: more than 10 distinct values but still an axis
    values = [1700000000 + 86400 * i for i in range(15)]
    profile = profile_dataset(_dataset(values))["v"]
    assert profile.is_numerical
    assert profile.is_temporal
    assert profile.classified_as_categorical


def test_epoch_millisecond_timestamps_count_as_temporal():
    assert is_temporal([1700000000000 + 3600000 * i for i in range(12)])


def test_numbers_below_epoch_range_are_not_temporal():
    assert not is_temporal([999999999, 1700000000])
    assert not is_temporal([12.5, 300, 4100])


def test_dates_inside_timestamp_bounds_are_temporal():
    # Values pandas can hold as Timestamps on any supported version
    assert is_temporal(["1678-01-01", "2262-04-10", "1970-01-01"])
