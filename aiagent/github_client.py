"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Knows the JSON shapes of repositories, issues and git data objects

Requests themselves go through `aiagent.transport.send_request`; everything else
(commit sequencing, issue rendering, CLI behavior) should use this client.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog

from aiagent.errors import MalformedResponse, RemoteAPIError
from aiagent.tasks import Issue, RepoRef
from aiagent.transport import decode_json, send_request

log = structlog.get_logger(__name__)

BLOB_MODE = "100644"


def _sha(data: Any, *path: str, what: str) -> str:
    """Dig a SHA out of a response (`_sha(d, "object", "sha")`), or fail loudly."""
    cur = data
    for key in path:
        cur = cur.get(key) if isinstance(cur, dict) else None
    if not isinstance(cur, str) or not cur:
        raise MalformedResponse(f"{what}: could not get SHA, response: {data!r}")
    return cur


class GitHubClient:
    def __init__(
        self,
        token: str,
        owner: str,
        *,
        api_base: str = "https://api.github.com",
        session: requests.Session | None = None,
    ) -> None:
        self._token = token
        self.owner = owner
        self._api_base = api_base.rstrip("/")
        self._session = session

    def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None, what: str) -> Any:
        raw = send_request(
            method,
            f"{self._api_base}{path}",
            token=self._token,
            json_body=json_body,
            session=self._session,
        )
        return decode_json(raw, what=what)

    # -- repositories and issues -------------------------------------------

    def create_repo(
        self,
        name: str,
        *,
        private: bool = False,
        auto_init: bool = True,
        description: str = "",
    ) -> RepoRef:
        """
        Create a repository for the authenticated user.

        Not idempotent: if `name` already exists, GitHub's error is raised as-is.
        With `auto_init=False` the repository starts without any commit.
        """
        body = {
            "name": name,
            "private": private,
            "auto_init": auto_init,
            "description": description,
            "has_issues": True,
        }
        data = self._request("POST", "/user/repos", json_body=body, what="create repo")
        branch = (data.get("default_branch") if isinstance(data, dict) else None) or "main"
        log.info("repo_created", repo=f"{self.owner}/{name}", private=private, auto_init=auto_init)
        return RepoRef(owner=self.owner, name=name, default_branch=branch)

    def create_issue(self, repo: RepoRef, *, title: str, body: str, labels: list[str] | tuple[str, ...]) -> Issue:
        payload = {"title": title, "body": body, "labels": list(labels)}
        data = self._request("POST", f"/repos/{repo.full_name}/issues", json_body=payload, what="create issue")
        return Issue.from_api(data)

    def get_issue(self, repo: RepoRef, number: int) -> Issue:
        data = self._request("GET", f"/repos/{repo.full_name}/issues/{number}", what="get issue")
        return Issue.from_api(data)

    # -- git data ------------------------------------------------------------

    def get_ref(self, repo: RepoRef, branch: str) -> str:
        """Return the commit SHA the branch points at."""
        data = self._request("GET", f"/repos/{repo.full_name}/git/refs/heads/{branch}", what="get ref")
        return _sha(data, "object", "sha", what="get ref")

    def create_ref(self, repo: RepoRef, branch: str, sha: str) -> None:
        body = {"ref": f"refs/heads/{branch}", "sha": sha}
        self._request("POST", f"/repos/{repo.full_name}/git/refs", json_body=body, what="create ref")

    def update_ref(self, repo: RepoRef, branch: str, sha: str, *, force: bool = True) -> None:
        """
        Move the branch to `sha`.

        With `force=True` there is no check of the previous tip, so a
        concurrent writer's commit can be overwritten.
        """
        path = f"/repos/{repo.full_name}/git/refs/heads/{branch}"
        data = self._request("PATCH", path, json_body={"sha": sha, "force": force}, what="update ref")
        # A 2xx reply that still carries a message is treated as a failure.
        if isinstance(data, dict) and data.get("message"):
            raise RemoteAPIError(
                None, str(data), method="PATCH", url=f"{self._api_base}{path}", message=str(data["message"])
            )

    def get_commit(self, repo: RepoRef, sha: str) -> tuple[str, str]:
        """Return (commit SHA, tree SHA)."""
        data = self._request("GET", f"/repos/{repo.full_name}/git/commits/{sha}", what="get commit")
        return _sha(data, "sha", what="get commit"), _sha(data, "tree", "sha", what="get commit")

    def create_blob(self, repo: RepoRef, content: str) -> str:
        body = {"content": content, "encoding": "utf-8"}
        data = self._request("POST", f"/repos/{repo.full_name}/git/blobs", json_body=body, what="create blob")
        return _sha(data, "sha", what="create blob")

    def create_tree(self, repo: RepoRef, entries: list[tuple[str, str]], *, base_tree: str | None = None) -> str:
        """
        Create a tree from (path, blob SHA) pairs.

        Without `base_tree` the tree holds only `entries`; with it, the entries
        replace same-path files and everything else is kept.
        """
        body: dict[str, Any] = {
            "tree": [{"path": path, "mode": BLOB_MODE, "type": "blob", "sha": sha} for path, sha in entries],
        }
        if base_tree is not None:
            body["base_tree"] = base_tree
        data = self._request("POST", f"/repos/{repo.full_name}/git/trees", json_body=body, what="create tree")
        return _sha(data, "sha", what="create tree")

    def create_commit(self, repo: RepoRef, *, message: str, tree: str, parents: list[str]) -> str:
        body: dict[str, Any] = {"message": message, "tree": tree}
        if parents:
            body["parents"] = parents
        data = self._request("POST", f"/repos/{repo.full_name}/git/commits", json_body=body, what="create commit")
        return _sha(data, "sha", what="create commit")
