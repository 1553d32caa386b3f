import pytest

from services import session_service
from services.xml_flatten_service import fallback_dataset


@pytest.fixture
def fallback():
    return fallback_dataset()


@pytest.fixture(autouse=True)
def clean_sessions():
    session_service._SESSIONS.clear()
    yield
    session_service._SESSIONS.clear()
