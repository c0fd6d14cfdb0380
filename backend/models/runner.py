from typing import Optional

from pydantic import BaseModel, Field


class RunnerInfo(BaseModel):
    name: str = Field(..., description="Display name used when assigning the runner to a script")
    hostname: Optional[str] = None
    runner_id: Optional[str] = None
    id: Optional[str] = None
    ip: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
