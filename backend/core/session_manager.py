import threading
import uuid
from typing import Any, Optional

from .errors import SessionNotFound
from .job_api import JobApiClient
from .reconciler import ScriptReconciler

# Edit sessions live in process memory only; each owns its reconciler exclusively.
_sessions: dict[str, ScriptReconciler] = {}
_lock = threading.Lock()


def open_session(client: JobApiClient, script_id: Optional[str] = None) -> tuple[str, ScriptReconciler]:
    """
    Start an edit session for an existing script, or a create session when
    script_id is None. Fetch failures propagate and no session is stored.
    """
    reconciler = ScriptReconciler(client, script_id)
    if script_id is not None:
        reconciler.load()
    reconciler.load_suggestions()
    reconciler.begin_edit()

    session_id = uuid.uuid4().hex
    with _lock:
        _sessions[session_id] = reconciler
    print(f"[*] Opened edit session {session_id} for {script_id or 'new script'}.")
    return session_id, reconciler


def get_session(session_id: str) -> ScriptReconciler:
    with _lock:
        reconciler = _sessions.get(session_id)
    if reconciler is None:
        raise SessionNotFound(session_id)
    return reconciler


def list_sessions() -> list[dict[str, Any]]:
    with _lock:
        items = list(_sessions.items())

    return [
        {
            "session_id": session_id,
            "script_id": reconciler.script_id,
            "editing": reconciler.editing,
            "submitting": reconciler.submitting,
        }
        for session_id, reconciler in items
    ]


def delete_session(session_id: str) -> None:
    with _lock:
        reconciler = _sessions.pop(session_id, None)
    if reconciler is not None:
        reconciler.reset()


def clear_sessions() -> None:
    with _lock:
        reconcilers = list(_sessions.values())
        _sessions.clear()
    for reconciler in reconcilers:
        reconciler.reset()
