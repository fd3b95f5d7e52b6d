"""
errors.py

Responsibility: the exception hierarchy shared by every module.

Callers catch `AgentError` to handle any failure raised by this package;
the CLI treats it as fatal everywhere except while filing individual issues.
"""

from __future__ import annotations


class AgentError(RuntimeError):
    pass


class TransportError(AgentError):
    """The request never produced an HTTP response (DNS, connection, TLS...)."""


class RemoteAPIError(AgentError):
    """
    A remote API answered with a non-2xx status or a structured error payload.

    `raw_body` holds the response bytes exactly as received; `body` is their
    UTF-8 text (invalid bytes replaced) for display. GitHub only reports some
    conditions (for example an empty repository) in the response text.
    """

    def __init__(
        self,
        status_code: int | None,
        body: str,
        *,
        method: str = "",
        url: str = "",
        message: str | None = None,
        raw_body: bytes | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.raw_body = body.encode("utf-8") if raw_body is None else raw_body
        self.method = method
        self.url = url
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        where = f" {self.method} {self.url}".rstrip() if (self.method or self.url) else ""
        if self.message is not None:
            return f"API error{where}: {self.message}"
        return f"API error (status {self.status_code}){where}: {self.body}"


class MalformedResponse(AgentError):
    """JSON returned by a remote did not have the expected shape."""


class EmptyResponseError(MalformedResponse):
    """The chat-completion reply carried no choices."""


class MalformedTaskJSON(MalformedResponse):
    """The completion text is not a JSON array of task objects."""


class ConfigurationError(AgentError):
    pass


class RenderError(AgentError):
    pass
