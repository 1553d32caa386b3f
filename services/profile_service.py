"""
Semantic type profiling of dataset fields.

`classify_values` is the one classification rule; the profiler and the
axis validator both go through it.
"""
import logging
import numbers
from typing import Dict, List, NamedTuple, Sequence

import pandas as pd

from models.common_models import Dataset, FieldProfile, Value

logger = logging.getLogger(__name__)

# Fields with at most this many distinct values can act as categories
CATEGORICAL_MAX_UNIQUE = 10

# Calendar formats recognised as temporal. Numeric values are checked as
# their text form, so compact dates like 20240115 count as temporal.
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y%m%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


# Numbers in these ranges are read as Unix timestamps. Smaller numbers
# (counts, measurements, years) are never timestamps.
EPOCH_UNIT_RANGES = (
    ("s", 1e9, 1e11),
    ("ms", 1e12, 1e14),
)


class FieldClassification(NamedTuple):
    is_numerical: bool
    is_temporal: bool
    unique_value_count: int
    is_categorical: bool


def is_numeric_value(value) -> bool:
    if isinstance(value, bool):
        return False
    if not isinstance(value, numbers.Number):
        return False
    return not pd.isna(value)


def _as_date_text(value: Value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _epoch_matches(values: Sequence[Value]) -> pd.Series:
    # Huge ints can't become floats; they are far outside every range anyway
    numeric = pd.Series(
        [float(v) if is_numeric_value(v) and abs(v) < 1e15 else float("nan") for v in values],
        dtype="float64",
    )
    matched = pd.Series(False, index=numeric.index)

    for unit, low, high in EPOCH_UNIT_RANGES:
        in_range = (numeric >= low) & (numeric < high)
        if not in_range.any():
            continue
        parsed = pd.to_datetime(numeric[in_range], unit=unit, errors="coerce")
        matched[in_range] = parsed.notna()

    return matched


def is_temporal(values: Sequence[Value]) -> bool:
    """
    True when every value is a date: text (or a number written out) matching
    one of DATE_FORMATS, or a number in an epoch seconds/milliseconds range.
    Dates outside the pandas Timestamp range never match.
    """
    texts = pd.Series([_as_date_text(v) for v in values], dtype="object")
    matched = _epoch_matches(values)

    for fmt in DATE_FORMATS:
        pending = ~matched
        if not pending.any():
            break
        parsed = pd.to_datetime(texts[pending], format=fmt, errors="coerce")
        matched[pending] = parsed.notna()

    return bool(matched.all())


def classify_values(values: Sequence[Value]) -> FieldClassification:
    """
    Classify the present values of one field.

    - numerical:   non-empty and every value numeric
    - temporal:    every value parses as a calendar date/time
    - categorical: not numerical, or temporal, or <= CATEGORICAL_MAX_UNIQUE distinct values
    """
    values = list(values)
    numerical = len(values) > 0 and all(is_numeric_value(v) for v in values)
    temporal = is_temporal(values)
    unique = int(pd.Series(values, dtype="object").nunique())
    categorical = (not numerical) or temporal or unique <= CATEGORICAL_MAX_UNIQUE
    return FieldClassification(numerical, temporal, unique, categorical)


def field_values(dataset: Dataset, name: str) -> List[Value]:
    # Records without the field contribute nothing
    return [record[name] for record in dataset.records if name in record]


def profile_field(dataset: Dataset, name: str) -> FieldProfile:
    c = classify_values(field_values(dataset, name))
    return FieldProfile(
        name=name,
        is_numerical=c.is_numerical,
        is_temporal=c.is_temporal,
        unique_value_count=c.unique_value_count,
        classified_as_categorical=c.is_categorical,
        classified_as_numerical_candidate=c.is_numerical,
    )


def profile_dataset(dataset: Dataset) -> Dict[str, FieldProfile]:
    profiles = {name: profile_field(dataset, name) for name in dataset.fields}
    logger.debug(
        "Profiled %d fields: categorical=%s numerical=%s",
        len(profiles),
        [p.name for p in profiles.values() if p.classified_as_categorical],
        [p.name for p in profiles.values() if p.classified_as_numerical_candidate],
    )
    return profiles
