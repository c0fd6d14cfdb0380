"""
Normalizes the /get-runners response into RunnerInfo records.

The upstream API has shipped several shapes over time: a bare list, a
``{"runners": [...]}`` envelope or a ``{"data": [...]}`` envelope, with each
entry either a plain runner name or an object. Nothing outside this module
should see the raw payload.
"""
from __future__ import annotations

from typing import Any, Optional

from ..models.runner import RunnerInfo


def _first_present(entry: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _split_tags(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [tag.strip() for tag in raw.split(",") if tag.strip()]
    if isinstance(raw, list):
        return [str(tag).strip() for tag in raw if str(tag).strip()]
    return []


def _extract_entries(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("runners", "data"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def decode_runner(entry: Any) -> RunnerInfo:
    if isinstance(entry, str):
        return RunnerInfo(name=entry)
    if isinstance(entry, dict) and entry:
        name = _first_present(entry, "name", "runner_id", "id")
        return RunnerInfo(
            name=str(name) if name is not None else str(entry),
            hostname=_as_text(entry.get("hostname") or entry.get("host")),
            runner_id=_as_text(entry.get("runner_id") or entry.get("id")),
            id=_as_text(entry.get("id")),
            ip=_as_text(entry.get("ip")),
            tags=_split_tags(entry.get("tags")),
        )
    return RunnerInfo(name=str(entry))


def decode_runners(data: Any) -> list[RunnerInfo]:
    """Decode any known /get-runners shape; unknown shapes yield an empty list."""
    return [decode_runner(entry) for entry in _extract_entries(data)]
