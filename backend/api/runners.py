import sys

from fastapi import APIRouter, Depends

from ..core.errors import JobApiError
from ..core.job_api import JobApiClient, get_client
from ..models.runner import RunnerInfo
from .common import http_error

router = APIRouter()


@router.get("/runners", response_model=list[RunnerInfo])
def get_runners(client: JobApiClient = Depends(get_client)):
    try:
        return client.list_runners()
    except JobApiError as exc:
        print(f"[!] Error fetching runners: {exc}", file=sys.stderr)
        raise http_error(exc, "inline") from exc
