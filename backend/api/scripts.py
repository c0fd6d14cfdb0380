import sys

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.errors import JobApiError
from ..core.job_api import JobApiClient, get_client
from ..models.script import Script, ScriptDetail
from .common import http_error

router = APIRouter()


@router.get("/scripts", response_model=list[Script])
def get_scripts(client: JobApiClient = Depends(get_client)):
    try:
        return client.list_scripts()
    except JobApiError as exc:
        print(f"[!] Error fetching scripts: {exc}", file=sys.stderr)
        raise http_error(exc, "inline") from exc


@router.get("/scripts/{script_id}", response_model=ScriptDetail)
def get_script_detail(script_id: str, client: JobApiClient = Depends(get_client)):
    try:
        return client.get_script(script_id)
    except JobApiError as exc:
        print(f"[!] Error fetching script detail: {exc}", file=sys.stderr)
        raise http_error(exc, "modal") from exc


@router.delete("/scripts/{script_id}")
def delete_script(
    script_id: str,
    confirm: bool = Query(default=False, description="Must be true; deletion cannot be undone"),
    client: JobApiClient = Depends(get_client),
):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail={
                "message": f"Deleting script {script_id} cannot be undone. Repeat with confirm=true.",
                "display": "modal",
                "confirm_required": True,
            },
        )
    try:
        client.delete_script(script_id)
    except JobApiError as exc:
        print(f"[!] Error deleting script: {exc}", file=sys.stderr)
        raise http_error(exc, "modal") from exc
    return {"message": "Script deleted successfully!", "redirect": "/scripts"}
