"""Tests for environment-based tool settings."""

from heroku_san.config import SanSettings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HEROKU_API_KEY", raising=False)
        monkeypatch.delenv("HEROKU_SAN_API_KEY", raising=False)
        settings = SanSettings()

        assert settings.api_url == "https://api.heroku.com"
        assert settings.config_file == "config/heroku.yml"
        assert settings.default_deploy_strategy == "rails"
        assert settings.has_api_key is False

    def test_api_key_from_heroku_variable(self, monkeypatch):
        monkeypatch.delenv("HEROKU_SAN_API_KEY", raising=False)
        monkeypatch.setenv("HEROKU_API_KEY", "from-heroku")
        assert SanSettings().api_key == "from-heroku"

    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("HEROKU_SAN_API_KEY", "from-san")
        monkeypatch.setenv("HEROKU_SAN_GIT_HOST", "git.example.com")
        settings = SanSettings()

        assert settings.api_key == "from-san"
        assert settings.git_host == "git.example.com"
        assert settings.has_api_key is True
