"""Tests for decoding the /get-runners response shapes."""

from backend.core.runner_adapter import decode_runner, decode_runners


def test_bare_list_of_names():
    runners = decode_runners(["runner-a", "runner-b"])
    assert [r.name for r in runners] == ["runner-a", "runner-b"]
    assert runners[0].hostname is None


def test_runners_envelope():
    runners = decode_runners({"runners": [{"name": "alpha", "host": "alpha.local"}]})
    assert runners[0].name == "alpha"
    assert runners[0].hostname == "alpha.local"


def test_data_envelope_with_upstream_runner_records():
    data = {"data": [{"id": "493bf9e8", "hostname": "worker-01", "ip": "10.0.0.1", "tags": "linux, docker,"}]}
    runner = decode_runners(data)[0]
    assert runner.name == "493bf9e8"
    assert runner.runner_id == "493bf9e8"
    assert runner.id == "493bf9e8"
    assert runner.ip == "10.0.0.1"
    assert runner.tags == ["linux", "docker"]


def test_name_falls_back_to_runner_id_then_id():
    assert decode_runner({"runner_id": "rid", "id": "iid"}).name == "rid"
    assert decode_runner({"id": 7}).name == "7"


def test_object_without_identifiers_uses_its_text():
    entry = {"hostname": "orphan"}
    assert decode_runner(entry).name == str(entry)


def test_non_string_entries_are_stringified():
    assert decode_runner(12).name == "12"


def test_unknown_shapes_decode_to_nothing():
    assert decode_runners(None) == []
    assert decode_runners({"items": ["a"]}) == []
    assert decode_runners({"runners": "runner-a"}) == []
