from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel

from ..models.runner import RunnerInfo
from ..models.script import Parameter, ScriptDetail, ScriptPayload, WorkingCopy
from .errors import (
    InvalidParameter,
    JobApiError,
    MissingFileName,
    ScriptValidationError,
    SessionBusy,
)
from .job_api import JobApiClient

SCALAR_FIELDS = ("file_name", "description", "status")

CANCEL_PROMPT = "You have unsaved changes. Are you sure you want to cancel?"


class FieldStore:
    """
    Holds the working copy for one edit session.

    Every mutation runs under one lock and raises SessionBusy while ``busy()``
    reports an outstanding save.
    """

    def __init__(self, busy: Optional[Callable[[], bool]] = None):
        self._copy: Optional[WorkingCopy] = None
        self._busy = busy or (lambda: False)
        self._lock = threading.RLock()

    @property
    def initialized(self) -> bool:
        return self._copy is not None

    @property
    def working_copy(self) -> WorkingCopy:
        with self._lock:
            return self._require().model_copy(deep=True)

    def initialize(self, baseline: WorkingCopy) -> WorkingCopy:
        with self._lock:
            self._copy = baseline.model_copy(deep=True)
            return self.working_copy

    def reset(self) -> None:
        with self._lock:
            self._copy = None

    @contextmanager
    def mutation(self) -> Iterator[None]:
        with self._lock:
            if self._busy():
                raise SessionBusy("Cannot edit while a save is in progress.")
            yield

    def set_field(self, name: str, value: Any) -> None:
        if name not in SCALAR_FIELDS:
            raise KeyError(f"'{name}' is not an editable scalar field")
        with self.mutation():
            self._replace(**{name: value})

    def get_list(self, name: str) -> list:
        with self._lock:
            return list(getattr(self._require(), name))

    def replace_list(self, name: str, items: list) -> None:
        with self.mutation():
            self._replace(**{name: list(items)})

    def _replace(self, **changes: Any) -> None:
        current = self._require()
        data = {**current.model_dump(), **changes}
        self._copy = WorkingCopy.model_validate(data)

    def _require(self) -> WorkingCopy:
        if self._copy is None:
            raise RuntimeError("No working copy; call initialize() first")
        return self._copy


class ListEditor:
    """
    Add/update/remove-by-index over one list field of the working copy.

    ``record_type`` is set for lists of records (parameters); updates then
    replace a single sub-field and leave its siblings untouched.
    """

    def __init__(
        self,
        store: FieldStore,
        field_name: str,
        default_factory: Callable[[], Any],
        record_type: Optional[type[BaseModel]] = None,
    ):
        self.store = store
        self.field_name = field_name
        self.default_factory = default_factory
        self.record_type = record_type

    def items(self) -> list:
        return self.store.get_list(self.field_name)

    def add(self, item: Any = None) -> int:
        with self.store.mutation():
            items = self.items()
            items.append(self.default_factory() if item is None else item)
            self.store.replace_list(self.field_name, items)
            return len(items) - 1

    def update(self, index: int, value: Any, field: Optional[str] = None) -> None:
        with self.store.mutation():
            items = self.items()
            self._check_index(items, index)

            if self.record_type is None:
                if field is not None:
                    raise KeyError(f"{self.field_name} items have no sub-field '{field}'")
                items[index] = value
            else:
                if field not in self.record_type.model_fields:
                    raise KeyError(f"{self.record_type.__name__} has no field '{field}'")
                current = items[index]
                items[index] = self.record_type.model_validate({**current.model_dump(), field: value})

            self.store.replace_list(self.field_name, items)

    def remove(self, index: int) -> None:
        with self.store.mutation():
            items = self.items()
            self._check_index(items, index)
            del items[index]
            self.store.replace_list(self.field_name, items)

    def _check_index(self, items: list, index: int) -> None:
        if not 0 <= index < len(items):
            raise IndexError(f"{self.field_name} index {index} out of range (length {len(items)})")


class RunnerListEditor(ListEditor):
    def add_from_suggestion(self, name: str) -> bool:
        """Append a suggested runner unless it is blank or already assigned."""
        with self.store.mutation():
            if not name or name in self.items():
                return False
            self.add(name)
            return True


def validate_working_copy(copy: WorkingCopy) -> ScriptPayload:
    if not copy.file_name.strip():
        raise MissingFileName()

    # Descriptions are collected but deliberately not required.
    invalid = [i for i, p in enumerate(copy.parameters) if not p.name.strip()]
    if invalid:
        raise InvalidParameter(invalid)

    return ScriptPayload(
        file_name=copy.file_name.strip(),
        description=copy.description.strip(),
        status=copy.status,
        param=[p.name.strip() for p in copy.parameters if p.name.strip()],
        tag=[t.strip() for t in copy.tags if t.strip()],
        runner=[r.strip() for r in copy.runners if r.strip()],
    )


def has_unsaved_changes(copy: WorkingCopy, baseline: WorkingCopy) -> bool:
    return copy.model_dump() != baseline.model_dump()


class SubmitState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class SubmitResult:
    accepted: bool
    state: SubmitState
    message: Optional[str] = None
    script_id: Optional[str] = None
    payload: Optional[ScriptPayload] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.accepted and self.state is SubmitState.SUCCESS


class SubmitCoordinator:
    """
    Single-slot gate around the save request. While one submit is outstanding
    any further submit is ignored and issues no request.

    ``copy`` may be a callable; it is then read only once the gate is held.
    """

    def __init__(self, client: JobApiClient):
        self.client = client
        self.state = SubmitState.IDLE
        self.last_error: Optional[str] = None
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def submit(
        self,
        script_id: Optional[str],
        copy: WorkingCopy | Callable[[], WorkingCopy],
        on_success: Optional[Callable[[SubmitResult], None]] = None,
    ) -> SubmitResult:
        if not self._in_flight.acquire(blocking=False):
            print("[*] Save already in progress; ignoring duplicate request.")
            return SubmitResult(accepted=False, state=self.state, message="A save is already in progress.")

        try:
            if callable(copy):
                copy = copy()
            self.state = SubmitState.VALIDATING
            try:
                payload = validate_working_copy(copy)
            except ScriptValidationError as exc:
                self.state = SubmitState.IDLE
                self.last_error = str(exc)
                return SubmitResult(accepted=True, state=self.state, message=str(exc), error=exc)

            self.state = SubmitState.SUBMITTING
            try:
                if script_id is None:
                    script_id = self.client.create_script(payload)
                else:
                    self.client.update_script(script_id, payload)
            except JobApiError as exc:
                print(f"[!] Error saving script: {exc}", file=sys.stderr)
                self.state = SubmitState.FAILED
                self.last_error = str(exc)
                return SubmitResult(
                    accepted=True, state=self.state, message=str(exc), script_id=script_id, error=exc
                )

            self.state = SubmitState.SUCCESS
            self.last_error = None
            result = SubmitResult(accepted=True, state=self.state, script_id=script_id, payload=payload)
            if on_success is not None:
                on_success(result)
            return result
        finally:
            self._in_flight.release()


class ScriptReconciler:
    """
    Edit/create lifecycle for a single script.

    Owns the working copy (through a FieldStore), the list editors, the
    last-known server copy used as the change baseline, and the submit gate.
    ``script_id=None`` puts the reconciler in create mode.
    """

    def __init__(self, client: JobApiClient, script_id: Optional[str] = None):
        self.client = client
        self.script_id = script_id
        self.coordinator = SubmitCoordinator(client)
        self.store = FieldStore(busy=lambda: self.coordinator.busy)
        self.parameters = ListEditor(self.store, "parameters", Parameter, record_type=Parameter)
        self.tags = ListEditor(self.store, "tags", str)
        self.runners = RunnerListEditor(self.store, "runners", str)

        self.detail: Optional[ScriptDetail] = None
        self.baseline: Optional[WorkingCopy] = None
        self.editing = False
        self.suggestions: list[RunnerInfo] = []
        self.load_error: Optional[str] = None
        self._fetching = threading.Lock()

    @property
    def is_new(self) -> bool:
        return self.script_id is None

    @property
    def submitting(self) -> bool:
        return self.coordinator.busy

    @property
    def working_copy(self) -> WorkingCopy:
        return self.store.working_copy

    # -------- fetch --------
    def load(self) -> Optional[ScriptDetail]:
        """Fetch the canonical script. Returns None if a fetch is already running."""
        if self.is_new:
            raise RuntimeError("A script that has not been created yet cannot be loaded")
        if not self._fetching.acquire(blocking=False):
            return None
        try:
            detail = self.client.get_script(self.script_id)
            self.detail = detail
            self.baseline = WorkingCopy.from_detail(detail)
            self.load_error = None
            return detail
        except JobApiError as exc:
            self.load_error = str(exc)
            raise
        finally:
            self._fetching.release()

    def load_suggestions(self) -> list[RunnerInfo]:
        try:
            self.suggestions = self.client.list_runners()
        except JobApiError as exc:
            print(f"[!] Error fetching available runners: {exc}", file=sys.stderr)
            self.suggestions = []
        return self.suggestions

    # -------- edit lifecycle --------
    def begin_edit(self) -> WorkingCopy:
        if self.is_new:
            self.baseline = WorkingCopy()
        elif self.baseline is None and self.load() is None:
            raise SessionBusy("The script is already being fetched.")
        self.editing = True
        return self.store.initialize(self.baseline)

    def set_field(self, name: str, value: Any) -> None:
        self.store.set_field(name, value)

    def has_unsaved_changes(self) -> bool:
        if not self.editing or self.baseline is None:
            return False
        return has_unsaved_changes(self.store.working_copy, self.baseline)

    def cancel(self, confirm: Callable[[str], bool]) -> bool:
        """
        Leave edit mode, reverting to the last server copy. ``confirm`` is asked
        once, and only when there is something to lose. Returns False when the
        user declines.
        """
        if not self.editing:
            return True
        if self.submitting:
            raise SessionBusy("Cannot cancel while a save is in progress.")
        if self.has_unsaved_changes() and not confirm(CANCEL_PROMPT):
            return False
        self.store.reset()
        self.editing = False
        return True

    def save(self) -> SubmitResult:
        if not self.editing:
            raise RuntimeError("save() called outside edit mode")
        return self.coordinator.submit(
            self.script_id, lambda: self.store.working_copy, on_success=self._after_save
        )

    def _after_save(self, result: SubmitResult) -> None:
        if self.is_new and result.script_id:
            self.script_id = result.script_id

        if not self.is_new:
            try:
                self.load()
            except JobApiError as exc:
                print(f"[!] Error refreshing script after save: {exc}", file=sys.stderr)

        self.store.reset()
        self.editing = False
        print(f"[*] Script {self.script_id or result.payload.file_name} saved.")

    def delete(self, confirm: Callable[[str], bool]) -> bool:
        if self.is_new:
            raise RuntimeError("A script that has not been created yet cannot be deleted")
        if self.submitting:
            raise SessionBusy("Cannot delete while a save is in progress.")

        file_name = self.detail.script.file_name if self.detail else self.script_id
        prompt = f'Are you sure you want to delete script "{file_name}"? This action cannot be undone.'
        if not confirm(prompt):
            return False

        self.client.delete_script(self.script_id)
        self.reset()
        return True

    def reset(self) -> None:
        self.store.reset()
        self.editing = False
        self.detail = None
        self.baseline = None
