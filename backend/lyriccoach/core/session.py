"""
Result session: the client's current state as one immutable value.

Every user action produces a new ResultSession via the transition functions
below; nothing updates a session in place. A new upload always starts from
an empty result set, so results from two batches are never merged.

ResultStore holds a single session for the whole process. The cached
``api_key`` therefore belongs to whoever ran the last upload and is shared
with every caller until forget_credential clears it.
"""
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from lyriccoach.schemas.result import NormalizedRecord


class ResultSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    records: Tuple[NormalizedRecord, ...] = ()
    status_message: str = ""
    error: Optional[str] = None
    api_key: Optional[str] = None


def begin_upload(state: ResultSession, file_count: int, api_key: Optional[str] = None) -> ResultSession:
    return state.model_copy(update={
        "records": (),
        "error": None,
        "status_message": f"Uploading and analyzing {file_count} song(s). Please wait...",
        "api_key": api_key if api_key else state.api_key,
    })


def upload_succeeded(state: ResultSession, records: Sequence[NormalizedRecord]) -> ResultSession:
    return state.model_copy(update={
        "records": tuple(records),
        "error": None,
        "status_message": f"Processed {len(records)} file(s).",
    })


def upload_failed(state: ResultSession, message: str) -> ResultSession:
    return state.model_copy(update={
        "records": (),
        "error": message,
        "status_message": "",
    })


def forget_credential(state: ResultSession) -> ResultSession:
    return state.model_copy(update={"api_key": None})


def load_demo(state: ResultSession, records: Sequence[NormalizedRecord]) -> ResultSession:
    return state.model_copy(update={
        "records": tuple(records),
        "error": None,
        "status_message": f"Showing {len(records)} example result(s).",
    })


class ResultStore:
    """Holds the current ResultSession for the running app."""

    def __init__(self, initial: Optional[ResultSession] = None):
        self._current = initial or ResultSession()

    @property
    def current(self) -> ResultSession:
        return self._current

    def replace(self, state: ResultSession) -> ResultSession:
        self._current = state
        return state
