from typing import Any, Optional

from pydantic import BaseModel, Field


class Job(BaseModel):
    # Field names follow the upstream job API verbatim
    ID: int
    RunnerID: Optional[str] = None
    MsgID: Optional[str] = None
    Status: str = ""
    RequestPayload: Optional[str] = None
    ResponsePayload: Optional[str] = None
    Timeout: bool = False
    created_at: Optional[str] = None


class LogEntry(BaseModel):
    msg_id: str
    runner_id: str = ""
    logs: str = ""
    status: str = ""
    message: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ListingResponse(BaseModel):
    items: list[Any] = Field(default_factory=list)
    count: int = 0
    mock: bool = Field(default=False, description="True when the items are bundled sample data")
