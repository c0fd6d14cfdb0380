import sys
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..core import session_manager
from ..core.errors import JobApiError, SessionBusy, SessionNotFound
from ..core.job_api import JobApiClient, get_client
from ..core.reconciler import ScriptReconciler
from ..models.session import (
    CancelRequest,
    FieldUpdateRequest,
    ItemAddRequest,
    ItemUpdateRequest,
    OpenSessionRequest,
    ParameterAddRequest,
    ParameterUpdateRequest,
    RunnerSuggestionRequest,
    SessionState,
)
from .common import http_error

router = APIRouter()


def _describe(session_id: str, reconciler: ScriptReconciler) -> SessionState:
    return SessionState(
        session_id=session_id,
        script_id=reconciler.script_id,
        mode="create" if reconciler.is_new else "edit",
        editing=reconciler.editing,
        submitting=reconciler.submitting,
        submit_state=reconciler.coordinator.state.value,
        dirty=reconciler.has_unsaved_changes(),
        last_error=reconciler.coordinator.last_error,
        load_error=reconciler.load_error,
        working_copy=reconciler.working_copy if reconciler.editing else None,
        suggestions=reconciler.suggestions,
    )


def _lookup(session_id: str) -> ScriptReconciler:
    try:
        return session_manager.get_session(session_id)
    except SessionNotFound as exc:
        raise http_error(exc) from exc


def _edit(session_id: str, action) -> SessionState:
    reconciler = _lookup(session_id)
    try:
        action(reconciler)
    except (IndexError, KeyError, ValueError, RuntimeError) as exc:
        raise http_error(exc) from exc
    return _describe(session_id, reconciler)


@router.post("/sessions", response_model=SessionState)
def open_session(request: OpenSessionRequest, client: JobApiClient = Depends(get_client)):
    try:
        session_id, reconciler = session_manager.open_session(client, request.script_id)
    except JobApiError as exc:
        print(f"[!] Error opening edit session: {exc}", file=sys.stderr)
        raise http_error(exc, "modal") from exc
    return _describe(session_id, reconciler)


@router.get("/sessions")
def get_sessions() -> list[dict[str, Any]]:
    return session_manager.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionState)
def get_session_detail(session_id: str):
    return _describe(session_id, _lookup(session_id))


@router.delete("/sessions/{session_id}")
def discard_session(session_id: str):
    session_manager.delete_session(session_id)
    return {"message": f"Edit session {session_id} discarded."}


@router.post("/sessions/{session_id}/edit", response_model=SessionState)
def begin_edit(session_id: str):
    reconciler = _lookup(session_id)
    if not reconciler.editing:
        try:
            reconciler.begin_edit()
        except (JobApiError, SessionBusy) as exc:
            raise http_error(exc, "modal") from exc
    return _describe(session_id, reconciler)


@router.patch("/sessions/{session_id}/fields", response_model=SessionState)
def update_fields(session_id: str, request: FieldUpdateRequest):
    def apply(reconciler: ScriptReconciler) -> None:
        for name, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                reconciler.set_field(name, value)

    return _edit(session_id, apply)


# -------- parameters --------
@router.post("/sessions/{session_id}/parameters", response_model=SessionState)
def add_parameter(session_id: str, request: ParameterAddRequest | None = None):
    parameter = request.parameter if request else None
    return _edit(session_id, lambda r: r.parameters.add(parameter))


@router.patch("/sessions/{session_id}/parameters/{index}", response_model=SessionState)
def update_parameter(session_id: str, index: int, request: ParameterUpdateRequest):
    return _edit(session_id, lambda r: r.parameters.update(index, request.value, field=request.field))


@router.delete("/sessions/{session_id}/parameters/{index}", response_model=SessionState)
def remove_parameter(session_id: str, index: int):
    return _edit(session_id, lambda r: r.parameters.remove(index))


# -------- tags --------
@router.post("/sessions/{session_id}/tags", response_model=SessionState)
def add_tag(session_id: str, request: ItemAddRequest | None = None):
    value = request.value if request else ""
    return _edit(session_id, lambda r: r.tags.add(value))


@router.patch("/sessions/{session_id}/tags/{index}", response_model=SessionState)
def update_tag(session_id: str, index: int, request: ItemUpdateRequest):
    return _edit(session_id, lambda r: r.tags.update(index, request.value))


@router.delete("/sessions/{session_id}/tags/{index}", response_model=SessionState)
def remove_tag(session_id: str, index: int):
    return _edit(session_id, lambda r: r.tags.remove(index))


# -------- runners --------
@router.post("/sessions/{session_id}/runners", response_model=SessionState)
def add_runner(session_id: str, request: ItemAddRequest | None = None):
    value = request.value if request else ""
    return _edit(session_id, lambda r: r.runners.add(value))


@router.post("/sessions/{session_id}/runners/suggested", response_model=SessionState)
def add_suggested_runner(session_id: str, request: RunnerSuggestionRequest):
    return _edit(session_id, lambda r: r.runners.add_from_suggestion(request.name))


@router.patch("/sessions/{session_id}/runners/{index}", response_model=SessionState)
def update_runner(session_id: str, index: int, request: ItemUpdateRequest):
    return _edit(session_id, lambda r: r.runners.update(index, request.value))


@router.delete("/sessions/{session_id}/runners/{index}", response_model=SessionState)
def remove_runner(session_id: str, index: int):
    return _edit(session_id, lambda r: r.runners.remove(index))


# -------- lifecycle --------
@router.post("/sessions/{session_id}/save")
def save_session(session_id: str):
    reconciler = _lookup(session_id)
    created = reconciler.is_new
    try:
        result = reconciler.save()
    except RuntimeError as exc:
        raise http_error(exc) from exc

    if not result.accepted:
        raise HTTPException(status_code=409, detail={"message": result.message, "display": "inline"})
    if result.error is not None:
        raise http_error(result.error, "inline")

    message = "Script created successfully!" if created else "Script updated successfully!"
    return {"message": message, "session": _describe(session_id, reconciler)}


@router.post("/sessions/{session_id}/cancel", response_model=SessionState)
def cancel_session(session_id: str, request: CancelRequest | None = None):
    reconciler = _lookup(session_id)
    confirmed = request.confirm if request else False
    prompts: list[str] = []

    def confirm(message: str) -> bool:
        prompts.append(message)
        return confirmed

    try:
        left = reconciler.cancel(confirm)
    except SessionBusy as exc:
        raise http_error(exc) from exc

    if not left:
        raise HTTPException(
            status_code=409,
            detail={"message": prompts[0], "display": "modal", "confirm_required": True},
        )
    return _describe(session_id, reconciler)


@router.post("/sessions/{session_id}/delete")
def delete_script(session_id: str, request: CancelRequest | None = None):
    reconciler = _lookup(session_id)
    confirmed = request.confirm if request else False
    prompts: list[str] = []

    def confirm(message: str) -> bool:
        prompts.append(message)
        return confirmed

    try:
        deleted = reconciler.delete(confirm)
    except (JobApiError, RuntimeError) as exc:
        print(f"[!] Error deleting script: {exc}", file=sys.stderr)
        raise http_error(exc, "modal") from exc

    if not deleted:
        raise HTTPException(
            status_code=409,
            detail={"message": prompts[0], "display": "modal", "confirm_required": True},
        )

    session_manager.delete_session(session_id)
    return {"message": "Script deleted successfully!", "redirect": "/scripts"}
