from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from models.common_models import AxisSelection, ChartKind, Dataset


class LoadedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_id: str
    file_name: str
    dataset: Dataset
    used_fallback: bool = False
    error_kind: Optional[str] = None
    warning: Optional[str] = None


class SessionState(BaseModel):
    """
    Snapshot of one user's workspace. Never mutated: every change
    stores a new snapshot in its place.
    """
    model_config = ConfigDict(frozen=True)

    session_id: str
    files: List[LoadedFile] = []
    selected_file_id: Optional[str] = None
    chart_kind: Optional[ChartKind] = None
    selection: Optional[AxisSelection] = None


class FileSummary(BaseModel):
    file_id: str
    file_name: str
    n_records: int
    fields: List[str]
    used_fallback: bool
    warning: Optional[str] = None
