"""
issues.py

Responsibility: turn tasks into GitHub issues.

A single task failing to file is not fatal: it is logged, recorded in the
returned report, and the remaining tasks are still filed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from aiagent.errors import AgentError
from aiagent.github_client import GitHubClient
from aiagent.tasks import Issue, RepoRef, Task

log = structlog.get_logger(__name__)

ACCEPTANCE_HEADING = "### Acceptance Criteria:\n"


def render_issue_body(task: Task) -> str:
    """
    Body text followed by a blank line and, when there are criteria, an
    acceptance-criteria heading with one bullet per criterion in order.
    """
    section = ""
    if task.acceptance_criteria:
        section = ACCEPTANCE_HEADING + "".join(f"- {item}\n" for item in task.acceptance_criteria)
    return f"{task.body}\n\n{section}"


def file_issue(client: GitHubClient, repo: RepoRef, task: Task) -> Issue:
    return client.create_issue(
        repo,
        title=task.title,
        body=render_issue_body(task),
        labels=task.labels,
    )


@dataclass
class FilingReport:
    created: list[Issue] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (task title, error text)

    @property
    def ok(self) -> bool:
        return not self.failed


def file_tasks(client: GitHubClient, repo: RepoRef, tasks: Iterable[Task]) -> FilingReport:
    report = FilingReport()
    for task in tasks:
        try:
            issue = file_issue(client, repo, task)
        except AgentError as e:
            log.warning("issue_failed", title=task.title, error=str(e))
            report.failed.append((task.title, str(e)))
            continue
        log.info("issue_created", number=issue.number, title=issue.title, url=issue.html_url)
        report.created.append(issue)
    return report
