"""
commits.py

Responsibility: add files to a repository's default branch through the git
data API, whether or not the branch has any commit yet.

Each file becomes its own commit:
- Empty branch, first file: blob -> tree (no base) -> parent-less commit -> create ref
- Otherwise: blob -> read tip -> tree on the tip's tree -> commit -> force-update ref

The tip is re-read for every file and never cached. Nothing is rolled back:
a failure midway can leave unreferenced blobs/trees/commits behind, and the
force update will overwrite a tip moved by another writer in the meantime.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from aiagent.errors import AgentError, RemoteAPIError
from aiagent.github_client import GitHubClient
from aiagent.tasks import File, RepoRef

log = structlog.get_logger(__name__)

EMPTY_REPOSITORY_MARKER = "Git Repository is empty"


def is_empty_repo_error(err: AgentError) -> bool:
    # GitHub reports this only in the body text (409 on the ref lookup).
    return isinstance(err, RemoteAPIError) and EMPTY_REPOSITORY_MARKER in str(err)


def branch_has_history(client: GitHubClient, repo: RepoRef) -> bool:
    try:
        client.get_ref(repo, repo.default_branch)
    except RemoteAPIError as e:
        if is_empty_repo_error(e):
            return False
        raise
    return True


def bootstrap_branch(client: GitHubClient, repo: RepoRef, file: File) -> str:
    """Create the first commit of an empty repository and the branch pointing at it."""
    blob_sha = client.create_blob(repo, file.content)
    tree_sha = client.create_tree(repo, [(file.path, blob_sha)])
    commit_sha = client.create_commit(
        repo,
        message=f"Initial commit: Add {file.path}",
        tree=tree_sha,
        parents=[],
    )
    client.create_ref(repo, repo.default_branch, commit_sha)
    log.info("branch_bootstrapped", repo=repo.full_name, path=file.path, commit=commit_sha)
    return commit_sha


def append_file(client: GitHubClient, repo: RepoRef, file: File) -> str:
    """Commit one file on top of the current branch tip."""
    blob_sha = client.create_blob(repo, file.content)

    tip = client.get_ref(repo, repo.default_branch)
    parent_sha, base_tree_sha = client.get_commit(repo, tip)

    tree_sha = client.create_tree(repo, [(file.path, blob_sha)], base_tree=base_tree_sha)
    commit_sha = client.create_commit(
        repo,
        message=f"docs: add {file.path}",
        tree=tree_sha,
        parents=[parent_sha],
    )
    client.update_ref(repo, repo.default_branch, commit_sha, force=True)
    log.info("file_committed", repo=repo.full_name, path=file.path, commit=commit_sha, parent=parent_sha)
    return commit_sha


def commit_files(client: GitHubClient, repo: RepoRef, files: Sequence[File]) -> list[str]:
    """
    Commit `files` in order, one commit each, and return the new commit SHAs.

    The branch ref is checked once. On an empty branch only the first file goes
    through the bootstrap path; the rest are appended on top of it. If the
    bootstrap fails, the remaining files are not attempted.
    """
    if not files:
        return []

    shas: list[str] = []
    remaining = list(files)
    if not branch_has_history(client, repo):
        log.info("empty_repository_detected", repo=repo.full_name)
        shas.append(bootstrap_branch(client, repo, remaining.pop(0)))

    for file in remaining:
        shas.append(append_file(client, repo, file))
    return shas
