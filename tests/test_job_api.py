"""Tests for the job API client."""

import pytest
import requests

from backend.core.errors import HttpError, MalformedResponse, NetworkError, NotFound
from backend.core.job_api import synthesize_parameters
from backend.models.script import Parameter, Script, ScriptPayload


def test_legacy_param_names_are_synthesized(job_client):
    detail = job_client.get_script("42")
    assert [p.model_dump() for p in detail.parameters] == [
        {"name": "subDomain", "type": "string", "required": True, "description": ""}
    ]
    assert detail.script.tag == ["web", "monitoring"]


def test_synthesized_parameters_override_rich_parameters():
    script = Script(script_id="1", param=["target"])
    rich = [Parameter(name="other", type="number")]
    assert [p.name for p in synthesize_parameters(script, rich)] == ["target"]


def test_rich_parameters_used_without_legacy_names(fake_session, job_client):
    fake_session.add(
        "GET",
        "/scripts/7",
        payload={
            "script": {"script_id": 7, "file_name": "backup.sh", "description": None, "status": False},
            "parameters": [{"name": "path", "type": "string", "required": True, "description": "Where"}],
        },
    )
    detail = job_client.get_script("7")
    assert detail.script.script_id == "7"
    assert detail.script.description == ""
    assert detail.script.runner == []
    assert detail.parameters[0].description == "Where"


def test_missing_script_is_not_found(fake_session, job_client):
    with pytest.raises(NotFound):
        job_client.get_script("404")

    fake_session.add("GET", "/scripts/8", payload={"script": None})
    with pytest.raises(NotFound):
        job_client.get_script("8")


def test_http_error_message_carries_status(fake_session, job_client):
    fake_session.add("PUT", "/scripts/42", status=500, payload={"error": "boom"})
    payload = ScriptPayload(file_name="a.sh", description="", status=True)
    with pytest.raises(HttpError) as excinfo:
        job_client.update_script("42", payload)
    assert str(excinfo.value) == "HTTP error! status: 500"
    assert excinfo.value.status_code == 500


def test_transport_failure_is_network_error(fake_session, job_client):
    fake_session.add("GET", "/get-scripts", error=requests.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        job_client.list_scripts()


def test_update_sends_normalized_body(fake_session, job_client):
    payload = ScriptPayload(file_name="a.sh", description="d", status=False, param=["x"], tag=["t"], runner=["r"])
    job_client.update_script("42", payload)
    assert fake_session.bodies("PUT", "/scripts/42") == [
        {"file_name": "a.sh", "description": "d", "status": False, "param": ["x"], "tag": ["t"], "runner": ["r"]}
    ]


def test_create_returns_new_id_when_reported(fake_session, job_client):
    fake_session.add("POST", "/scripts", status=201, payload={"script": {"script_id": "99"}})
    payload = ScriptPayload(file_name="new.sh", description="", status=True)
    assert job_client.create_script(payload) == "99"

    fake_session.add("POST", "/scripts", payload={"message": "created"})
    assert job_client.create_script(payload) is None


def test_listings_accept_both_envelopes(fake_session, job_client):
    fake_session.add("GET", "/get-scripts", payload={"data": [{"script_id": "1", "file_name": "a.sh"}]})
    fake_session.add("GET", "/get-jobs", payload={"data": [{"ID": 1, "RunnerID": "r", "Status": "done"}]})
    fake_session.add("GET", "/get-logs", payload={"logs": [{"msg_id": "m1", "status": "success"}]})

    assert [s.file_name for s in job_client.list_scripts()] == ["a.sh"]
    assert job_client.list_jobs()[0].Status == "done"
    assert job_client.list_logs()[0].msg_id == "m1"
    assert [r.name for r in job_client.list_runners()] == ["runner-a", "r-2"]


def test_malformed_records_are_reported_as_api_errors(fake_session, job_client):
    fake_session.add("GET", "/scripts/9", payload={"script": {"script_id": "9", "file_name": None}})
    fake_session.add(
        "GET",
        "/scripts/10",
        payload={"script": {"script_id": "10"}, "parameters": [{"name": "when", "type": "datetime"}]},
    )
    fake_session.add("GET", "/get-scripts", payload={"scripts": [{"file_name": "no-id.sh"}]})
    fake_session.add("GET", "/get-jobs", payload={"jobs": [{"Status": "done"}]})

    for call in (
        lambda: job_client.get_script("9"),
        lambda: job_client.get_script("10"),
        job_client.list_scripts,
        job_client.list_jobs,
    ):
        with pytest.raises(MalformedResponse):
            call()
