import sys

from fastapi import APIRouter, Depends

from .. import config
from ..core.errors import JobApiError
from ..core.job_api import JobApiClient, get_client
from ..core.mock_data import mock_logs
from ..models.job import ListingResponse
from .common import http_error

router = APIRouter()


@router.get("/jobs", response_model=ListingResponse)
def get_jobs(client: JobApiClient = Depends(get_client)):
    try:
        jobs = client.list_jobs()
    except JobApiError as exc:
        print(f"[!] Error fetching jobs: {exc}", file=sys.stderr)
        raise http_error(exc, "inline") from exc
    return ListingResponse(items=jobs, count=len(jobs))


@router.get("/logs", response_model=ListingResponse)
def get_logs(client: JobApiClient = Depends(get_client)):
    try:
        logs = client.list_logs()
    except JobApiError as exc:
        print(f"[!] Error fetching logs: {exc}", file=sys.stderr)
        if not config.MOCK_LOGS_FALLBACK:
            raise http_error(exc, "inline") from exc
        print("[*] Using mock logs data as fallback")
        logs = mock_logs()
        return ListingResponse(items=logs, count=len(logs), mock=True)
    return ListingResponse(items=logs, count=len(logs))
