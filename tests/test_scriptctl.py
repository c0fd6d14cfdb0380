"""Tests for the scriptctl command line tool."""

import json

from scripts.scriptctl import main


def test_show_prints_detail(job_client, capsys):
    assert main(["show", "42"], client=job_client) == 0
    detail = json.loads(capsys.readouterr().out)
    assert detail["script"]["file_name"] == "check_site.sh"
    assert detail["parameters"][0]["name"] == "subDomain"


def test_list(fake_session, job_client, capsys):
    fake_session.add("GET", "/get-scripts", payload={"scripts": [{"script_id": "42", "file_name": "check_site.sh"}]})
    assert main(["list"], client=job_client) == 0
    out = capsys.readouterr().out
    assert "1 script(s)" in out
    assert "check_site.sh" in out


def test_edit_sends_one_update(fake_session, job_client):
    code = main(
        ["edit", "42", "--add-tag", "prod", "--remove-tag", "web", "--runner", "runner-a", "--runner", "r-9"],
        client=job_client,
    )

    assert code == 0
    assert fake_session.bodies("PUT", "/scripts/42") == [
        {
            "file_name": "check_site.sh",
            "description": "Checks that a website answers",
            "status": True,
            "param": ["subDomain"],
            "tag": ["monitoring", "prod"],
            "runner": ["runner-a", "runner-a", "r-9"],
        }
    ]


def test_edit_without_changes_still_saves(fake_session, job_client):
    assert main(["edit", "42"], client=job_client) == 0
    assert fake_session.count("PUT", "/scripts/42") == 1
    assert fake_session.bodies("PUT", "/scripts/42")[0]["tag"] == ["web", "monitoring"]


def test_edit_with_blank_file_name_fails_validation(fake_session, job_client, capsys):
    assert main(["edit", "42", "--file-name", " "], client=job_client) == 1
    assert fake_session.count("PUT", "/scripts/42") == 0
    assert "File name is required" in capsys.readouterr().err


def test_create(fake_session, job_client):
    fake_session.add("POST", "/scripts", payload={"id": 42})
    code = main(["create", "--file-name", "new.sh", "--param", "host", "--tag", "ops"], client=job_client)

    assert code == 0
    assert fake_session.bodies("POST", "/scripts") == [
        {"file_name": "new.sh", "description": "", "status": True, "param": ["host"], "tag": ["ops"], "runner": []}
    ]


def test_delete_with_yes(fake_session, job_client):
    assert main(["delete", "42", "--yes"], client=job_client) == 0
    assert fake_session.count("DELETE", "/scripts/42") == 1


def test_delete_declined_at_prompt(fake_session, job_client, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    assert main(["delete", "42"], client=job_client) == 1
    assert fake_session.count("DELETE", "/scripts/42") == 0


def test_upstream_failure_exits_with_2(job_client, capsys):
    assert main(["show", "404"], client=job_client) == 2
    assert "HTTP error! status: 404" in capsys.readouterr().err
