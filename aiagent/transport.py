"""
transport.py

Responsibility: the one place that sends HTTP requests.

Both remote APIs (GitHub and the chat-completion endpoint) go through
`send_request`, which:
- Builds the standard headers (bearer token, content negotiation)
- Returns the raw response body on success
- Raises `RemoteAPIError` for any status >= 300, keeping the body verbatim
- Raises `TransportError` when no response was received at all

There are no retries and no timeout beyond the transport default.
"""

from __future__ import annotations

import json
from typing import Any

import requests
import structlog

from aiagent.errors import MalformedResponse, RemoteAPIError, TransportError

log = structlog.get_logger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"
JSON_ACCEPT = "application/json"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "aiagent"


def build_headers(token: str, *, accept: str = GITHUB_ACCEPT, has_body: bool = False) -> dict[str, str]:
    headers = {
        "Accept": accept,
        "Authorization": f"Bearer {token}",
        "User-Agent": USER_AGENT,
    }
    if accept == GITHUB_ACCEPT:
        headers["X-GitHub-Api-Version"] = GITHUB_API_VERSION
    if has_body:
        headers["Content-Type"] = "application/json"
    return headers


def send_request(
    method: str,
    url: str,
    *,
    token: str,
    json_body: Any = None,
    accept: str = GITHUB_ACCEPT,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> bytes:
    """
    Send one request and return the response body.

    `json_body` is serialized by us (not by requests) so the Content-Type
    header is only present when a body is actually sent.
    """
    has_body = json_body is not None
    headers = build_headers(token, accept=accept, has_body=has_body)
    data = json.dumps(json_body).encode("utf-8") if has_body else None

    send = session.request if session is not None else requests.request
    log.debug("http_request", method=method, url=url)
    try:
        r = send(method, url, headers=headers, data=data, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    body = r.content or b""
    log.debug("http_response", method=method, url=url, status=r.status_code)
    if r.status_code >= 300:
        raise RemoteAPIError(
            r.status_code,
            body.decode("utf-8", errors="replace"),
            method=method,
            url=url,
            raw_body=body,
        )
    return body


def decode_json(raw: bytes, *, what: str) -> Any:
    """Parse a response body, reporting `what` was being read on failure."""
    try:
        return json.loads(raw.decode("utf-8")) if raw else None
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        text = raw.decode("utf-8", errors="replace")
        raise MalformedResponse(f"{what}: response is not valid JSON: {text}") from e
