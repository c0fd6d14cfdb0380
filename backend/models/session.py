from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .runner import RunnerInfo
from .script import Parameter, WorkingCopy


class OpenSessionRequest(BaseModel):
    script_id: Optional[str] = Field(
        default=None, description="Script to edit; omit to start a create session"
    )


class FieldUpdateRequest(BaseModel):
    file_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[bool] = None


class ParameterAddRequest(BaseModel):
    parameter: Optional[Parameter] = Field(default=None, description="Defaults to a blank string parameter")


class ParameterUpdateRequest(BaseModel):
    field: Literal["name", "type", "required", "description"]
    value: Any


class ItemAddRequest(BaseModel):
    value: str = Field(default="", description="Initial text of the new entry")


class ItemUpdateRequest(BaseModel):
    value: str


class RunnerSuggestionRequest(BaseModel):
    name: str = Field(..., description="Runner name picked from the suggestion list")


class CancelRequest(BaseModel):
    confirm: bool = Field(default=False, description="Discard unsaved changes without asking again")


class SessionState(BaseModel):
    session_id: str
    script_id: Optional[str]
    mode: Literal["edit", "create"]
    editing: bool
    submitting: bool
    submit_state: str
    dirty: bool
    last_error: Optional[str] = None
    load_error: Optional[str] = None
    working_copy: Optional[WorkingCopy] = None
    suggestions: list[RunnerInfo] = Field(default_factory=list)
