from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ParameterType = Literal["string", "number", "boolean", "array", "object"]


class Parameter(BaseModel):
    name: str = Field(default="", description="Parameter name passed to the script")
    type: ParameterType = Field(default="string", description="Declared value type")
    required: bool = Field(default=False, description="Whether callers must supply a value")
    description: str = Field(default="", description="Free-text help for the parameter")


class Script(BaseModel):
    script_id: str = Field(..., description="Opaque identifier assigned by the job API")
    file_name: str = Field(default="", description="Executable artifact the script runs")
    description: str = Field(default="")
    status: bool = Field(default=True, description="Active (true) or Inactive (false)")
    param: Optional[list[Any]] = Field(
        default=None,
        description="Legacy parameter list; usually bare parameter names",
    )
    tag: list[str] = Field(default_factory=list)
    runner: list[str] = Field(default_factory=list, description="Runner names the script is assigned to")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("script_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tag", "runner", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ScriptDetail(BaseModel):
    script: Script
    parameters: list[Parameter] = Field(default_factory=list)


class ScriptPayload(BaseModel):
    """Body sent on PUT /scripts/{id} and POST /scripts."""

    file_name: str
    description: str
    status: bool
    param: list[str] = Field(default_factory=list)
    tag: list[str] = Field(default_factory=list)
    runner: list[str] = Field(default_factory=list)


class WorkingCopy(BaseModel):
    """Editable draft of a script's mutable fields."""

    file_name: str = ""
    description: str = ""
    status: bool = True
    parameters: list[Parameter] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    runners: list[str] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: ScriptDetail) -> "WorkingCopy":
        script = detail.script
        return cls(
            file_name=script.file_name,
            description=script.description,
            status=script.status,
            parameters=[p.model_copy() for p in detail.parameters],
            tags=list(script.tag),
            runners=list(script.runner),
        )
