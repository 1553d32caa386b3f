"""
Chart/axis compatibility checks.

Rules, first match wins:
  bar, line, pie    X axis must be categorical
  any chart kind    every Y field must be numeric
  pie               exactly one Y field
Scatter and 3D charts accept any X field.
"""
import logging
from typing import Dict, List, Optional

from models.common_models import (
    AxisCandidates,
    AxisSelection,
    ChartKind,
    Dataset,
    FieldProfile,
    ValidationErrorKind,
    ValidationVerdict,
)
from services.axis_service import recommend_axes
from services.profile_service import classify_values, field_values

logger = logging.getLogger(__name__)

CATEGORICAL_X_KINDS = (ChartKind.bar, ChartKind.line, ChartKind.pie)

_CHART_TITLES = {
    ChartKind.bar: "Bar Chart",
    ChartKind.line: "Line Chart",
    ChartKind.pie: "Pie Chart",
    ChartKind.scatter: "Scatter Chart",
    ChartKind.three_dimensional: "3D Chart",
}

DEFAULT_X_SUGGESTION = "a categorical field"


def _quoted(names: List[str]) -> str:
    return ", ".join(f"'{n}'" for n in names)


def _invalid(kind: ValidationErrorKind, message: str, suggestion: str, fields: List[str]) -> ValidationVerdict:
    logger.info("Rejected axis selection (%s): %s", kind.value, message)
    return ValidationVerdict(
        valid=False,
        error_kind=kind,
        message=message,
        suggestion=suggestion,
        suggested_fields=fields,
    )


def is_categorical_field(dataset: Dataset, name: str) -> bool:
    return classify_values(field_values(dataset, name)).is_categorical


def non_numeric_fields(dataset: Dataset, names: List[str]) -> List[str]:
    return [
        name for name in names
        if not classify_values(field_values(dataset, name)).is_numerical
    ]


def _check_preconditions(
    dataset: Optional[Dataset],
    selection: Optional[AxisSelection],
    candidates: AxisCandidates,
) -> Optional[ValidationVerdict]:
    kind = ValidationErrorKind.invalid_selection
    x_names = [o.value for o in candidates.x_candidates]
    y_names = [o.value for o in candidates.y_candidates]

    if dataset is None or not dataset.records:
        return _invalid(
            kind,
            "Invalid data or axis selection: the dataset has no records.",
            "Upload an XML file with at least one entry.",
            [],
        )

    if selection is None or not selection.x_field or not selection.y_fields:
        return _invalid(
            kind,
            "Invalid data or axis selection. Both an X-axis field and at least one Y-axis field are required.",
            f"Select an X-axis such as {_quoted(x_names[:1])} and Y-axes such as {_quoted(y_names)}.",
            x_names[:1] + y_names,
        )

    duplicates = sorted({n for n in selection.y_fields if selection.y_fields.count(n) > 1})
    if duplicates:
        unique = list(dict.fromkeys(selection.y_fields))
        return _invalid(
            kind,
            f"Invalid axis selection. Y-axis fields must be unique, but {_quoted(duplicates)} was selected more than once.",
            f"Use the Y-axes {_quoted(unique)}.",
            unique,
        )

    known = set(dataset.fields)
    unknown = [n for n in [selection.x_field] + selection.y_fields if n not in known]
    if unknown:
        return _invalid(
            kind,
            f"Invalid axis selection. The field(s) {_quoted(unknown)} do not exist in this dataset.",
            f"Choose from the available fields: {_quoted(dataset.fields)}.",
            list(dataset.fields),
        )

    return None


def validate_selection(
    dataset: Optional[Dataset],
    profiles: Dict[str, FieldProfile],
    chart_kind: ChartKind,
    selection: Optional[AxisSelection],
) -> ValidationVerdict:
    """
    Decide whether `selection` can be drawn as `chart_kind`.

    The X field is re-classified from the dataset rather than looked up in
    `profiles`; the profiles only feed the candidate lists used in
    suggestions.
    """
    candidates = recommend_axes(profiles)

    verdict = _check_preconditions(dataset, selection, candidates)
    if verdict is not None:
        return verdict

    x_field = selection.x_field
    y_fields = list(selection.y_fields)
    title = _CHART_TITLES[chart_kind]

    if chart_kind in CATEGORICAL_X_KINDS and not is_categorical_field(dataset, x_field):
        suggested_x = next(
            (o.value for o in candidates.x_candidates if is_categorical_field(dataset, o.value)),
            None,
        )
        return _invalid(
            ValidationErrorKind.non_categorical_x_axis,
            f"Invalid axis selection for {title}. The X-axis ('{x_field}') is numerical, "
            f"but it should be categorical for this chart type.",
            f"Use '{suggested_x or DEFAULT_X_SUGGESTION}' as the X-axis and keep {_quoted(y_fields)} as the Y-axis. "
            f"Alternatively, switch to a Scatter or 3D chart to plot numerical data on the X-axis.",
            [suggested_x] if suggested_x else [],
        )

    bad_y = non_numeric_fields(dataset, y_fields)
    if bad_y:
        y_names = [o.value for o in candidates.y_candidates]
        return _invalid(
            ValidationErrorKind.non_numeric_y_axis,
            f"Invalid axis selection. The Y-axis ({', '.join(y_fields)}) contains non-numerical data "
            f"in {_quoted(bad_y)}. The Y-axis must be numerical for all chart types.",
            f"Select numerical fields for the Y-axis, such as {_quoted(y_names)}.",
            y_names,
        )

    if chart_kind == ChartKind.pie and len(y_fields) > 1:
        return _invalid(
            ValidationErrorKind.too_many_y_axes_for_pie,
            f"Invalid axis selection for {title}. Only one Y-axis field is allowed, "
            f"but {len(y_fields)} fields ({', '.join(y_fields)}) were selected.",
            f"Select a single numerical field for the Y-axis, such as '{y_fields[0]}'.",
            [y_fields[0]],
        )

    return ValidationVerdict(valid=True)


def y_selection_warning(dataset: Dataset, y_fields: List[str]) -> Optional[str]:
    """Soft warning while Y fields are being picked; not a verdict."""
    known = [name for name in y_fields if name in dataset.fields]
    if not known or not non_numeric_fields(dataset, known):
        return None
    return "Some selected Y-axis fields contain non-numerical data, which may not display correctly in charts."
