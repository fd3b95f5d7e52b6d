"""
openai_client.py

Responsibility: talk to a chat-completion endpoint.

Two operations are built on `complete`:
- `ask_for_tasks`: the reply content must itself be a JSON array of tasks
- `generate_readme`: the reply content is returned as opaque markdown

The model's text is trusted verbatim: it is parsed, never sanitized.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog

from aiagent.errors import EmptyResponseError, MalformedResponse, RemoteAPIError
from aiagent.prompts import README_SYSTEM_PROMPT, TASKS_SYSTEM_PROMPT, build_readme_prompt
from aiagent.tasks import Task, parse_tasks
from aiagent.transport import JSON_ACCEPT, decode_json, send_request

log = structlog.get_logger(__name__)

DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_TASK_MODEL = "o4-mini-2025-04-16"
DEFAULT_README_MODEL = "gpt-3.5-turbo"


def _error_message(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    err = payload.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return None


class OpenAIClient:
    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        task_model: str = DEFAULT_TASK_MODEL,
        readme_model: str = DEFAULT_README_MODEL,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self.task_model = task_model
        self.readme_model = readme_model
        self._session = session

    def complete(self, system: str, user: str, *, model: str) -> str:
        """
        Send a two-message chat and return the first choice's content.

        A structured `error.message` wins over the HTTP status, whether or not
        the status was 2xx.
        """
        url = f"{self._api_base}/chat/completions"
        body = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        log.info("completion_requested", model=model)
        try:
            raw = send_request(
                "POST",
                url,
                token=self._api_key,
                json_body=body,
                accept=JSON_ACCEPT,
                session=self._session,
            )
        except RemoteAPIError as e:
            try:
                payload = decode_json(e.body.encode("utf-8"), what="chat completion error")
            except MalformedResponse:
                raise e from None
            message = _error_message(payload)
            if message is None:
                raise
            raise RemoteAPIError(e.status_code, e.body, method="POST", url=url, message=message) from e

        payload = decode_json(raw, what="chat completion")
        message = _error_message(payload)
        if message is not None:
            raise RemoteAPIError(None, raw.decode("utf-8", errors="replace"), method="POST", url=url, message=message)

        if not isinstance(payload, dict):
            raise MalformedResponse(f"chat completion: expected an object, got: {payload!r}")
        choices = payload.get("choices") or []
        if not isinstance(choices, list):
            raise MalformedResponse(f"chat completion: `choices` is not a list: {choices!r}")
        if not choices:
            raise EmptyResponseError("No choices returned by the model")

        try:
            content = choices[0]["message"]["content"]
        except (KeyError, TypeError) as e:
            raise MalformedResponse(f"chat completion: unexpected choice shape: {choices[0]!r}") from e
        if not isinstance(content, str):
            raise MalformedResponse(f"chat completion: content is not text: {content!r}")
        return content

    def ask_for_tasks(self, prompt: str) -> list[Task]:
        content = self.complete(TASKS_SYSTEM_PROMPT, prompt, model=self.task_model)
        tasks = parse_tasks(content)
        log.info("tasks_received", count=len(tasks))
        return tasks

    def generate_readme(self, project_name: str, idea: str, stack: str | None = None) -> str:
        prompt = build_readme_prompt(project_name, idea, stack)
        return self.complete(README_SYSTEM_PROMPT, prompt, model=self.readme_model)
