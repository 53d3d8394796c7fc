"""Exception hierarchy for heroku-san."""

from typing import List, Optional

import httpx


class HerokuSanError(Exception):
    """Base class for every heroku-san error."""

    pass


class ConfigurationError(HerokuSanError):
    """Stage configuration is missing or invalid."""

    pass


class ConfigFileNotFound(ConfigurationError):
    """The stage configuration file does not exist."""

    pass


class MissingApplication(ConfigurationError):
    """A stage has no `app:` value."""

    pass


class UnknownDeployStrategy(ConfigurationError):
    """A `deploy:` value does not name a registered strategy."""

    pass


class UnknownStage(ConfigurationError):
    """A stage name is not present in the configuration."""

    pass


class NoStagesSelected(ConfigurationError):
    """An operation was requested without any stage to run it on."""

    pass


class InvalidMaintenanceAction(HerokuSanError, ValueError):
    """Maintenance action is neither on nor off."""

    pass


class HerokuAPIError(HerokuSanError):
    """A request to the Heroku platform API failed."""

    def __init__(
        self,
        status: str,
        message: str,
        response: Optional[httpx.Response] = None,
    ):
        self.status = status
        self.message = message
        self.response = response
        super().__init__(f"Heroku API ERROR: {status} ({message})")


class ShellCommandError(HerokuSanError):
    """A local shell command exited non-zero."""

    def __init__(self, command: str, exit_code: int, stderr: str):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Command `{command}` failed with code {exit_code}: {stderr}")


class GitCommandError(HerokuSanError):
    """A git command exited non-zero."""

    def __init__(self, command: List[str], exit_code: int, stderr: str):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            f"Git command {' '.join(command)} failed with code {exit_code}: {stderr}"
        )


class AddonInstallFailure(HerokuSanError):
    """A single add-on could not be installed."""

    def __init__(self, addon: str, reason: str):
        self.addon = addon
        self.reason = reason
        super().__init__(f"Could not install add-on {addon}: {reason}")
