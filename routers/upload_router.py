from typing import Optional
from fastapi import APIRouter, UploadFile, File, Form, HTTPException

from services.file_upload_service import UploadTooLarge, read_uploaded_file
from services.xml_flatten_service import load_dataset
from services.profile_service import profile_dataset
from services.axis_service import recommend_axes
from services.session_service import add_file, create_session, get_session

router = APIRouter(prefix="/upload", tags=["upload"])

@router.post("/xml")
async def upload_xml(file: UploadFile = File(...), session_id: Optional[str] = Form(None)):
    try:
        content = read_uploaded_file(file)
    except UploadTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Reuse the caller's session, or start a new one
    if session_id:
        try:
            get_session(session_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="Session not found.")
    else:
        session_id = create_session().session_id

    # Parse failures come back as the fallback dataset plus a warning
    ingest = load_dataset(content, file.filename)
    loaded = add_file(session_id, file.filename, ingest)

    candidates = recommend_axes(profile_dataset(loaded.dataset))

    return {
        "session_id": session_id,
        "file_id": loaded.file_id,
        "file_name": loaded.file_name,
        "n_records": len(loaded.dataset.records),
        "fields": loaded.dataset.fields,
        "used_fallback": loaded.used_fallback,
        "error_kind": loaded.error_kind,
        "warning": loaded.warning,
        "x_candidates": [o.model_dump() for o in candidates.x_candidates],
        "y_candidates": [o.model_dump() for o in candidates.y_candidates],
    }
