from __future__ import annotations

import sys
from typing import Any, Optional, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from .. import config
from ..models.job import Job, LogEntry
from ..models.runner import RunnerInfo
from ..models.script import Parameter, Script, ScriptDetail, ScriptPayload
from .errors import HttpError, MalformedResponse, NetworkError, NotFound
from .runner_adapter import decode_runners

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: Any, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        print(f"[!] Unexpected {what} in job API response: {exc}", file=sys.stderr)
        raise MalformedResponse(f"Job API returned a malformed {what}") from exc


def synthesize_parameters(script: Script, parameters: list[Parameter]) -> list[Parameter]:
    """
    Legacy scripts carry bare parameter names in ``param``; when they do, those
    names win over the richer ``parameters`` list from the response.
    """
    legacy = script.param or []
    if legacy and isinstance(legacy[0], str):
        return [
            Parameter(name=name, type="string", required=True, description="")
            for name in legacy
            if isinstance(name, str)
        ]
    return [p.model_copy() for p in parameters]


class JobApiClient:
    """Thin JSON-over-HTTP client for the remote job execution API."""

    def __init__(
        self,
        base_url: str = config.JOB_API_BASE_URL,
        timeout: float = config.JOB_API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, json: Any = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            print(f"[!] {method} {url} failed: {exc!r}", file=sys.stderr)
            raise NetworkError(f"Unable to reach job API at {self.base_url}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            print(f"[!] {method} {url} returned {response.status_code}", file=sys.stderr)
            raise HttpError(response.status_code, response.text)
        return response

    def _get_json(self, path: str) -> Any:
        response = self._request("GET", path)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpError(response.status_code, response.text) from exc

    # -------- scripts --------
    def list_scripts(self) -> list[Script]:
        data = self._get_json("/get-scripts")
        rows = (data.get("scripts") or data.get("data") or []) if isinstance(data, dict) else []
        return [_parse(Script, row, "script") for row in rows]

    def get_script(self, script_id: str) -> ScriptDetail:
        print(f"[*] Fetching script {script_id}...")
        try:
            data = self._get_json(f"/scripts/{script_id}")
        except HttpError as exc:
            if exc.status_code == 404:
                raise NotFound(f"script {script_id}", exc.body) from exc
            raise

        if not isinstance(data, dict) or not data.get("script"):
            raise NotFound(f"script {script_id}")

        script = _parse(Script, data["script"], "script")
        parameters = [_parse(Parameter, p, "parameter") for p in data.get("parameters") or []]
        return ScriptDetail(script=script, parameters=synthesize_parameters(script, parameters))

    def update_script(self, script_id: str, payload: ScriptPayload) -> None:
        print(f"[*] Updating script {script_id}...")
        try:
            self._request("PUT", f"/scripts/{script_id}", json=payload.model_dump())
        except HttpError as exc:
            if exc.status_code == 404:
                raise NotFound(f"script {script_id}", exc.body) from exc
            raise

    def create_script(self, payload: ScriptPayload) -> Optional[str]:
        """Create a script and return its new id when the API reports one."""
        print(f"[*] Creating script {payload.file_name}...")
        response = self._request("POST", "/scripts", json=payload.model_dump())
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        created = body.get("script") if isinstance(body.get("script"), dict) else body
        script_id = created.get("script_id") or created.get("id")
        return str(script_id) if script_id is not None else None

    def delete_script(self, script_id: str) -> None:
        print(f"[*] Deleting script {script_id}...")
        try:
            self._request("DELETE", f"/scripts/{script_id}")
        except HttpError as exc:
            if exc.status_code == 404:
                raise NotFound(f"script {script_id}", exc.body) from exc
            raise

    # -------- runners, jobs, logs --------
    def list_runners(self) -> list[RunnerInfo]:
        return decode_runners(self._get_json("/get-runners"))

    def list_jobs(self) -> list[Job]:
        data = self._get_json("/get-jobs")
        rows = (data.get("jobs") or data.get("data") or []) if isinstance(data, dict) else []
        return [_parse(Job, row, "job") for row in rows]

    def list_logs(self) -> list[LogEntry]:
        data = self._get_json("/get-logs")
        rows = (data.get("logs") or []) if isinstance(data, dict) else []
        return [_parse(LogEntry, row, "log entry") for row in rows]


_client_singleton: Optional[JobApiClient] = None


def get_client() -> JobApiClient:
    global _client_singleton
    if _client_singleton is None:
        _client_singleton = JobApiClient()
    return _client_singleton
