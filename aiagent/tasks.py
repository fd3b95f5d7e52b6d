"""
tasks.py

Responsibility: the plain records passed between modules.

- `Task`: one unit of work proposed by the language model
- `File`: one blob to commit (repository-relative path + text)
- `RepoRef`: owner/name/default branch of the repository being bootstrapped
- `Issue`: the subset of a GitHub issue we read back

Nothing here is persisted; every record lives for one CLI invocation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from aiagent.errors import MalformedResponse, MalformedTaskJSON


def _str_list(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedTaskJSON(f"`{field_name}` must be a list of strings, got: {value!r}")
    return value


@dataclass(frozen=True)
class Task:
    """A task as returned by the model, consumed once by the issue filer."""

    title: str
    body: str = ""
    acceptance_criteria: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise MalformedTaskJSON(f"Each task must be a JSON object, got: {data!r}")

        title = data.get("title") or ""
        body = data.get("body") or ""
        if not isinstance(title, str) or not isinstance(body, str):
            raise MalformedTaskJSON(f"`title` and `body` must be strings: {data!r}")

        criteria = _str_list(data.get("acceptance_criteria"), field_name="acceptance_criteria")
        # Labels behave as a set; keep first-seen order for a stable payload.
        labels = tuple(dict.fromkeys(_str_list(data.get("labels"), field_name="labels")))

        return cls(title=title, body=body, acceptance_criteria=tuple(criteria), labels=labels)


def parse_tasks(text: str) -> list[Task]:
    """
    Parse completion text into tasks.

    The text must itself be a JSON array of task objects. The number of tasks
    is whatever the model returned.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedTaskJSON(f"Failed to parse task JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedTaskJSON(f"Task JSON must be an array, got {type(data).__name__}")
    return [Task.from_dict(item) for item in data]


@dataclass(frozen=True)
class File:
    path: str
    content: str


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str
    default_branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    body: str
    html_url: str

    @classmethod
    def from_api(cls, data: Any) -> Issue:
        if not isinstance(data, dict) or not isinstance(data.get("number"), int):
            raise MalformedResponse(f"Unexpected issue payload: {data!r}")
        return cls(
            number=data["number"],
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
            html_url=str(data.get("html_url") or ""),
        )
