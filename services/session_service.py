"""
In-memory session store.

Each session is a frozen SessionState; every operation builds a new
snapshot and swaps it in, so readers never see a half-applied change.
"""
import logging
import uuid
from typing import Dict, Optional

from models.common_models import AxisSelection, ChartKind
from models.session_models import LoadedFile, SessionState
from services.xml_flatten_service import IngestResult

logger = logging.getLogger(__name__)

_SESSIONS: Dict[str, SessionState] = {}


def create_session(session_id: Optional[str] = None) -> SessionState:
    session = SessionState(session_id=session_id or uuid.uuid4().hex)
    _SESSIONS[session.session_id] = session
    logger.debug("Created session %s", session.session_id)
    return session


def get_session(session_id: str) -> SessionState:
    if session_id not in _SESSIONS:
        raise KeyError("Session not found.")
    return _SESSIONS[session_id]


def _store(session: SessionState) -> SessionState:
    _SESSIONS[session.session_id] = session
    return session


def get_file(session_id: str, file_id: str) -> LoadedFile:
    session = get_session(session_id)
    for f in session.files:
        if f.file_id == file_id:
            return f
    raise KeyError(f"File '{file_id}' not found for this session.")


def add_file(session_id: str, file_name: str, ingest: IngestResult) -> LoadedFile:
    session = get_session(session_id)
    loaded = LoadedFile(
        file_id=uuid.uuid4().hex,
        file_name=file_name or "fallback.xml",
        dataset=ingest.dataset,
        used_fallback=ingest.used_fallback,
        error_kind=ingest.error_kind,
        warning=ingest.warning,
    )
    _store(session.model_copy(update={"files": session.files + [loaded]}))
    logger.debug("Session %s: added file %s (%s)", session_id, loaded.file_id, loaded.file_name)
    return loaded


def remove_file(session_id: str, file_id: str) -> SessionState:
    get_file(session_id, file_id)
    session = get_session(session_id)
    update = {"files": [f for f in session.files if f.file_id != file_id]}
    if session.selected_file_id == file_id:
        update.update(selected_file_id=None, chart_kind=None, selection=None)
    logger.debug("Session %s: removed file %s", session_id, file_id)
    return _store(session.model_copy(update=update))


def clear_files(session_id: str) -> SessionState:
    session = get_session(session_id)
    logger.debug("Session %s: cleared %d files", session_id, len(session.files))
    return _store(SessionState(session_id=session.session_id))


def select_file(session_id: str, file_id: str) -> SessionState:
    # Switching files drops any chart configuration made for the previous one
    get_file(session_id, file_id)
    session = get_session(session_id)
    return _store(session.model_copy(update={
        "selected_file_id": file_id,
        "chart_kind": None,
        "selection": None,
    }))


def update_selection(
    session_id: str,
    file_id: str,
    chart_kind: Optional[ChartKind],
    selection: Optional[AxisSelection],
) -> SessionState:
    get_file(session_id, file_id)
    session = get_session(session_id)
    return _store(session.model_copy(update={
        "selected_file_id": file_id,
        "chart_kind": chart_kind,
        "selection": selection,
    }))
