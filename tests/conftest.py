"""Shared fixtures: an in-process mock Heroku API and recording collaborators."""

from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

import mock_platform
from heroku_san.client.platform import HerokuAPI
from heroku_san.config import SanSettings
from heroku_san.stage import Stage


class RecordingGit:
    """Stands in for GitHelper and records what a stage asks of it."""

    def __init__(self, tagged: Optional[str] = "tagged-sha", remote: Optional[str] = "sha"):
        self.tagged = tagged
        self.remote = remote
        self.pushes: List[tuple] = []
        self.tag_lookups: List[Optional[str]] = []

    def parsed_tag(self, pattern: Optional[str]) -> Optional[str]:
        self.tag_lookups.append(pattern)
        return self.tagged

    def remote_revision(self, repo_url: str) -> Optional[str]:
        return self.remote

    def named_rev(self, revision: Optional[str]) -> str:
        return f"{revision} production/123456" if revision else ""

    def push(self, revision: Optional[str], repo_url: str, flags: Sequence[str] = ()) -> str:
        self.pushes.append((revision, repo_url, list(flags)))
        return ""


@pytest.fixture(autouse=True)
def platform():
    """Fresh mock platform state for every test."""
    mock_platform.reset()
    yield mock_platform
    mock_platform.reset()


@pytest.fixture
def settings():
    return SanSettings(api_key=mock_platform.API_KEY, api_url="http://testserver")


@pytest.fixture
def api(settings):
    with TestClient(mock_platform.app) as client:
        yield HerokuAPI.from_settings(settings, client=client)


@pytest.fixture
def git():
    return RecordingGit()


@pytest.fixture
def commands(monkeypatch):
    """Captures shell command lines instead of running them."""
    issued: List[str] = []

    def fake_sh(command, env=None, capture=True):
        issued.append(command)
        return ""

    monkeypatch.setattr("heroku_san.stage.sh", fake_sh)
    return issued


@pytest.fixture
def make_stage(settings, api, git):
    def factory(name: str = "production", options: Optional[dict] = None) -> Stage:
        return Stage(name, options, settings=settings, api=api, git=git)

    return factory


@pytest.fixture
def stage(make_stage):
    return make_stage(
        "production",
        {"app": "awesomeapp", "stack": "bamboo-ree-1.8.7", "addons": ["one", "two"]},
    )
