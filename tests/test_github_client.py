"""Tests for aiagent/github_client.py against the in-memory GitHub fake."""

import pytest

from aiagent.errors import MalformedResponse, RemoteAPIError
from aiagent.github_client import GitHubClient
from aiagent.tasks import Issue, RepoRef
from tests.fakes import FakeResponse, FakeSession


class TestCreateRepo:
    def test_creates_repo_for_user(self, github, fake_github):
        ref = github.create_repo("ai-todo", description="A todo app")

        assert ref == RepoRef(owner="octo", name="ai-todo", default_branch="main")
        (body,) = fake_github.calls_to("POST", "/user/repos")
        assert body["name"] == "ai-todo"
        assert body["private"] is False
        assert body["auto_init"] is True
        assert body["description"] == "A todo app"

    def test_auto_init_false_leaves_repo_empty(self, github, fake_github):
        github.create_repo("ai-empty", auto_init=False)
        assert fake_github.history("ai-empty") == []

    def test_existing_name_surfaces_platform_error_verbatim(self, github, fake_github):
        fake_github.add_repo("taken")

        with pytest.raises(RemoteAPIError) as exc:
            github.create_repo("taken")

        assert exc.value.status_code == 422
        assert "name already exists on this account" in str(exc.value)

    def test_sends_bearer_token(self, fake_github):
        seen = {}

        def handler(method, url, headers=None, data=None, timeout=None):
            seen.update(headers)
            return fake_github.request(method, url, headers=headers, data=data, timeout=timeout)

        GitHubClient("secret", "octo", session=FakeSession(handler)).create_repo("x")

        assert seen["Authorization"] == "Bearer secret"
        assert seen["Accept"] == "application/vnd.github+json"


class TestIssues:
    def test_create_and_get_issue(self, github, fake_github):
        fake_github.add_repo("proj")
        repo = RepoRef("octo", "proj")

        created = github.create_issue(repo, title="Set up CI", body="Body", labels=("ci", "setup"))
        fetched = github.get_issue(repo, created.number)

        assert created == Issue(number=1, title="Set up CI", body="Body", html_url="https://github.com/octo/proj/issues/1")
        assert fetched == created
        (body,) = fake_github.calls_to("POST", "/repos/octo/proj/issues")
        assert body["labels"] == ["ci", "setup"]

    def test_get_missing_issue(self, github, fake_github):
        fake_github.add_repo("proj")

        with pytest.raises(RemoteAPIError) as exc:
            github.get_issue(RepoRef("octo", "proj"), 99)
        assert exc.value.status_code == 404


class TestGitData:
    def test_get_ref_on_empty_repo_reports_body(self, github, fake_github):
        fake_github.add_repo("proj")

        with pytest.raises(RemoteAPIError, match="Git Repository is empty"):
            github.get_ref(RepoRef("octo", "proj"), "main")

    def test_get_commit_returns_commit_and_tree(self, github, fake_github):
        fake_github.add_repo("proj", commits=1)
        repo = RepoRef("octo", "proj")

        tip = github.get_ref(repo, "main")
        sha, tree = github.get_commit(repo, tip)

        assert sha == tip
        assert tree == fake_github.commits[tip]["tree"]

    def test_create_commit_without_parents_omits_key(self, github, fake_github):
        fake_github.add_repo("proj")
        repo = RepoRef("octo", "proj")
        blob = github.create_blob(repo, "hi")
        tree = github.create_tree(repo, [("a.txt", blob)])

        github.create_commit(repo, message="root", tree=tree, parents=[])

        (body,) = fake_github.calls_to("POST", "/git/commits")
        assert "parents" not in body

    def test_create_tree_entries(self, github, fake_github):
        fake_github.add_repo("proj")
        fake_github.trees["tree-base"] = {"keep.txt": "blob-keep"}
        repo = RepoRef("octo", "proj")

        sha = github.create_tree(repo, [("docs/a.md", "blob-x")], base_tree="tree-base")

        assert fake_github.trees[sha] == {"keep.txt": "blob-keep", "docs/a.md": "blob-x"}

        (body,) = fake_github.calls_to("POST", "/git/trees")
        assert body == {
            "tree": [{"path": "docs/a.md", "mode": "100644", "type": "blob", "sha": "blob-x"}],
            "base_tree": "tree-base",
        }

    def test_unknown_base_tree_is_rejected(self, github, fake_github):
        fake_github.add_repo("proj")

        with pytest.raises(RemoteAPIError) as exc:
            github.create_tree(RepoRef("octo", "proj"), [("a.md", "blob-x")], base_tree="tree-missing")
        assert exc.value.status_code == 422

    def test_update_ref_forces(self, github, fake_github):
        fake_github.add_repo("proj", commits=2)
        repo = RepoRef("octo", "proj")
        root = fake_github.history("proj")[-1]

        github.update_ref(repo, "main", root)

        (body,) = fake_github.calls_to("PATCH", "/git/refs/heads/main")
        assert body == {"sha": root, "force": True}
        assert fake_github.repos["proj"].refs["main"] == root

    def test_update_ref_message_in_success_reply_is_an_error(self, fake_github):
        fake_github.add_repo("proj", commits=1)

        def handler(method, url, **kwargs):
            if method == "PATCH":
                return FakeResponse.json_body(200, {"message": "Update is not a fast forward"})
            return fake_github.request(method, url, **kwargs)

        client = GitHubClient("t", "octo", session=FakeSession(handler))
        with pytest.raises(RemoteAPIError, match="Update is not a fast forward"):
            client.update_ref(RepoRef("octo", "proj"), "main", "commit-9")

    def test_missing_sha_is_malformed(self, fake_github):
        def handler(method, url, **kwargs):
            return FakeResponse.json_body(201, {"url": "https://api.github.com/blob"})

        client = GitHubClient("t", "octo", session=FakeSession(handler))
        with pytest.raises(MalformedResponse, match="create blob"):
            client.create_blob(RepoRef("octo", "proj"), "content")
