from fastapi import APIRouter, HTTPException

from config import PREVIEW_ROWS
from models.common_models import FileRequest, PreviewRequest, SelectionRequest, SessionRequest, ValidateRequest
from models.session_models import FileSummary, LoadedFile
from services import session_service
from services.preview_service import get_preview_rows
from services.profile_service import profile_dataset
from services.axis_service import recommend_axes
from services.validation_service import validate_selection, y_selection_warning
from services.render_payload_service import build_render_payload

router = APIRouter(prefix="/data", tags=["data"])


def _session_or_404(session_id: str):
    try:
        return session_service.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found.")


def _file_or_404(session_id: str, file_id: str) -> LoadedFile:
    _session_or_404(session_id)
    try:
        return session_service.get_file(session_id, file_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="File not found.")


def _summary(f: LoadedFile) -> dict:
    return FileSummary(
        file_id=f.file_id,
        file_name=f.file_name,
        n_records=len(f.dataset.records),
        fields=f.dataset.fields,
        used_fallback=f.used_fallback,
        warning=f.warning,
    ).model_dump()


@router.post("/files")
async def list_files(req: SessionRequest):
    session = _session_or_404(req.session_id)
    return {
        "selected_file_id": session.selected_file_id,
        "files": [_summary(f) for f in session.files],
    }

@router.post("/files/delete")
async def delete_file(req: FileRequest):
    _file_or_404(req.session_id, req.file_id)
    session = session_service.remove_file(req.session_id, req.file_id)
    return {"files": [_summary(f) for f in session.files]}

@router.post("/files/clear")
async def clear_files(req: SessionRequest):
    _session_or_404(req.session_id)
    session_service.clear_files(req.session_id)
    return {"files": []}

@router.post("/select")
async def select_file(req: FileRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    session_service.select_file(req.session_id, req.file_id)
    candidates = recommend_axes(profile_dataset(loaded.dataset))
    return {"file": _summary(loaded), **candidates.model_dump()}

@router.post("/preview")
async def preview_data(req: PreviewRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    n_rows = req.n_rows if req.n_rows is not None else PREVIEW_ROWS
    return get_preview_rows(loaded.dataset, n_rows)

@router.post("/profile")
async def profile_data(req: FileRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    profiles = profile_dataset(loaded.dataset)
    return {"profiles": [p.model_dump() for p in profiles.values()]}

@router.post("/axes")
async def axis_candidates(req: FileRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    return recommend_axes(profile_dataset(loaded.dataset)).model_dump()

@router.post("/selection")
async def update_selection(req: SelectionRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    session_service.update_selection(req.session_id, req.file_id, req.chart_kind, req.selection)

    y_fields = req.selection.y_fields if req.selection else []
    response = {
        "warning": y_selection_warning(loaded.dataset, y_fields),
        "verdict": None,
    }
    if req.chart_kind is not None:
        verdict = validate_selection(loaded.dataset, profile_dataset(loaded.dataset), req.chart_kind, req.selection)
        response["verdict"] = verdict.model_dump(mode="json")
    return response

@router.post("/validate")
async def validate(req: ValidateRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    verdict = validate_selection(loaded.dataset, profile_dataset(loaded.dataset), req.chart_kind, req.selection)
    return verdict.model_dump(mode="json")

@router.post("/chart")
async def chart_payload(req: ValidateRequest):
    loaded = _file_or_404(req.session_id, req.file_id)
    profiles = profile_dataset(loaded.dataset)
    verdict = validate_selection(loaded.dataset, profiles, req.chart_kind, req.selection)

    payload = None
    if verdict.valid:
        candidates = recommend_axes(profiles)
        payload = build_render_payload(loaded.dataset, candidates, req.chart_kind, req.selection)
        payload = payload.model_dump(mode="json")

    return {"verdict": verdict.model_dump(mode="json"), "payload": payload}
