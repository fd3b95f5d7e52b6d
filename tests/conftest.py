"""Shared fixtures."""

import pytest
import structlog

from aiagent.github_client import GitHubClient
from tests.fakes import FakeGitHub, FakeSession


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_github():
    return FakeGitHub(owner="octo")


@pytest.fixture
def github(fake_github):
    """A real GitHubClient whose HTTP calls land on the in-memory fake."""
    return GitHubClient("gh-token", "octo", session=FakeSession(fake_github))
