"""Tests for stage selection across a project."""

import pytest

from heroku_san.configuration import Configuration
from heroku_san.exceptions import NoStagesSelected, UnknownStage
from heroku_san.project import Project


@pytest.fixture
def project(tmp_path, settings):
    path = tmp_path / "heroku.yml"
    path.write_text(
        "production:\n  app: awesomeapp\n"
        "staging:\n  app: awesomeapp-staging\n"
        "demo:\n  app: awesomeapp-demo\n"
    )
    return Project(Configuration(path, settings=settings))


def test_all_names_keep_file_order(project):
    assert project.all_names == ["production", "staging", "demo"]


def test_stages_are_built_once(project):
    assert project["staging"] is project["staging"]


def test_unknown_stage(project):
    with pytest.raises(UnknownStage, match="production, staging, demo"):
        project["qa"]


def test_select_all(project):
    assert [stage.name for stage in project.select(["all"])] == ["production", "staging", "demo"]


def test_select_deduplicates(project):
    selected = project.select(["staging", "all", "staging"])
    assert [stage.name for stage in selected] == ["staging", "production", "demo"]


def test_each_app_collects_results(project):
    results = project.each_app(["demo", "production"], lambda stage: stage.app_name)
    assert results == {"demo": "awesomeapp-demo", "production": "awesomeapp"}


def test_each_app_needs_a_stage(project):
    with pytest.raises(NoStagesSelected, match="production, staging, demo, all"):
        project.each_app([], lambda stage: None)


def test_each_app_stops_at_the_first_error(project):
    visited = []

    def explode_on_staging(stage):
        visited.append(stage.name)
        if stage.name == "staging":
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        project.each_app(["all"], explode_on_staging)
    assert visited == ["production", "staging"]


def test_stages_share_the_project_api(tmp_path, settings, api):
    path = tmp_path / "heroku.yml"
    path.write_text("production:\n  app: awesomeapp\nstaging:\n  app: awesomeapp-staging\n")
    project = Project(Configuration(path, settings=settings), api=api)

    assert project["production"].heroku is api
    assert project["staging"].heroku is api
