from enum import Enum
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Value = Union[int, float, str]
Record = Dict[str, Value]


class ChartKind(str, Enum):
    bar = "bar"
    line = "line"
    pie = "pie"
    scatter = "scatter"
    three_dimensional = "threeDimensional"


class ValidationErrorKind(str, Enum):
    invalid_selection = "InvalidSelection"
    non_categorical_x_axis = "NonCategoricalXAxis"
    non_numeric_y_axis = "NonNumericYAxis"
    too_many_y_axes_for_pie = "TooManyYAxesForPie"


class Dataset(BaseModel):
    """
    Flattened records of one uploaded document.
    `fields` is the union of record keys in first-appearance order.
    """
    model_config = ConfigDict(frozen=True)

    records: List[Record] = Field(min_length=1)
    fields: List[str] = Field(min_length=1)

    @classmethod
    def from_records(cls, records: List[Record]) -> "Dataset":
        fields: Dict[str, None] = {}
        for record in records:
            for name in record:
                fields.setdefault(name, None)
        return cls(records=records, fields=list(fields))


class FieldProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    is_numerical: bool
    is_temporal: bool
    unique_value_count: int
    classified_as_categorical: bool
    classified_as_numerical_candidate: bool


class AxisOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class AxisCandidates(BaseModel):
    model_config = ConfigDict(frozen=True)

    x_candidates: List[AxisOption]
    y_candidates: List[AxisOption]


class AxisSelection(BaseModel):
    # Empty or duplicate fields are reported by the validator
    model_config = ConfigDict(frozen=True)

    x_field: Optional[str] = None
    y_fields: List[str] = []


class ValidationVerdict(BaseModel):
    valid: bool
    error_kind: Optional[ValidationErrorKind] = None
    message: Optional[str] = None
    suggestion: Optional[str] = None
    suggested_fields: List[str] = []


class RenderPayload(BaseModel):
    """What the chart-drawing component receives for a valid selection."""
    records: List[Record]
    x_field: str
    y_fields: List[str]
    chart_kind: ChartKind
    x_candidates: List[AxisOption]
    y_candidates: List[AxisOption]
    z_field: Optional[str] = None


# ---------------- Requests ----------------

class SessionRequest(BaseModel):
    session_id: str


class FileRequest(BaseModel):
    session_id: str
    file_id: str


class PreviewRequest(FileRequest):
    n_rows: Optional[int] = None


class SelectionRequest(FileRequest):
    chart_kind: Optional[ChartKind] = None
    selection: Optional[AxisSelection] = None


class ValidateRequest(FileRequest):
    chart_kind: ChartKind
    selection: Optional[AxisSelection] = None
