"""pytest configuration and fixtures for the job console tests."""

import copy
import json

import pytest
from fastapi.testclient import TestClient

from backend.core import session_manager
from backend.core.job_api import JobApiClient, get_client
from backend.main import app

BASE_URL = "http://jobs.test"

SCRIPT_42 = {
    "script": {
        "script_id": "42",
        "file_name": "check_site.sh",
        "description": "Checks that a website answers",
        "status": True,
        "param": ["subDomain"],
        "tag": ["web", "monitoring"],
        "runner": ["runner-a"],
        "created_at": "2024-03-15T10:30:00Z",
        "updated_at": "2024-03-15T10:30:45Z",
    }
}

RUNNERS = {
    "runners": [
        "runner-a",
        {"id": "r-2", "hostname": "worker-02", "ip": "10.0.0.2", "tags": "linux, gpu"},
    ]
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = "" if payload is None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes are keyed by (method, path)."""

    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []

    def add(self, method, path, status=200, payload=None, handler=None, error=None):
        self.routes[(method, path)] = handler or error or FakeResponse(status, payload)

    def request(self, method, url, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append((method, path, copy.deepcopy(json)))
        route = self.routes.get((method, path))
        if route is None:
            return FakeResponse(404, {"error": "not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            result = route(json)
            return result if isinstance(result, FakeResponse) else FakeResponse(200, result)
        return route

    def count(self, method, path):
        return sum(1 for m, p, _ in self.calls if m == method and p == path)

    def bodies(self, method, path):
        return [body for m, p, body in self.calls if m == method and p == path]


@pytest.fixture
def fake_session():
    session = FakeSession()
    session.add("GET", "/scripts/42", payload=copy.deepcopy(SCRIPT_42))
    session.add("PUT", "/scripts/42", payload={"message": "updated"})
    session.add("DELETE", "/scripts/42", payload={"message": "deleted"})
    session.add("GET", "/get-runners", payload=copy.deepcopy(RUNNERS))
    return session


@pytest.fixture
def job_client(fake_session):
    return JobApiClient(base_url=BASE_URL, timeout=5, session=fake_session)


@pytest.fixture(autouse=True)
def clear_edit_sessions():
    session_manager.clear_sessions()
    yield
    session_manager.clear_sessions()


@pytest.fixture
def api(job_client):
    app.dependency_overrides[get_client] = lambda: job_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
