"""Tests for shell execution."""

import pytest

from heroku_san.exceptions import ShellCommandError
from heroku_san.shell import clean_environment, sh


def test_clean_environment_drops_interpreter_and_tool_variables(monkeypatch):
    monkeypatch.setenv("PYTHONPATH", "/somewhere")
    monkeypatch.setenv("VIRTUAL_ENV", "/venv")
    monkeypatch.setenv("HEROKU_SAN_API_KEY", "secret")
    monkeypatch.setenv("HEROKU_APP", "kept")

    env = clean_environment()

    assert "PYTHONPATH" not in env
    assert "VIRTUAL_ENV" not in env
    assert "HEROKU_SAN_API_KEY" not in env
    assert env["HEROKU_APP"] == "kept"


def test_sh_returns_stdout():
    assert sh("echo hello") == "hello\n"


def test_sh_uses_the_given_environment():
    assert sh("echo $GREETING", env={"GREETING": "hi", "PATH": "/usr/bin:/bin"}) == "hi\n"


def test_sh_raises_on_failure():
    with pytest.raises(ShellCommandError) as excinfo:
        sh("echo nope >&2; exit 3")

    assert excinfo.value.exit_code == 3
    assert excinfo.value.stderr == "nope"
    assert excinfo.value.command == "echo nope >&2; exit 3"


def test_uncaptured_output_returns_empty_string():
    assert sh("true", capture=False) == ""
