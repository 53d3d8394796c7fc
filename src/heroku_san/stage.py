"""A named Heroku deployment stage and its operations."""

import re
from contextlib import contextmanager
from enum import Enum
from functools import cached_property
from typing import Any, Dict, Iterator, List, Optional, Union

import structlog

from .client.models import AddonInfo, AppInfo, StackInfo
from .client.platform import HerokuAPI
from .config import SanSettings
from .deploy.base import DeploymentResult, DeployStrategy
from .exceptions import (
    AddonInstallFailure,
    ConfigurationError,
    HerokuAPIError,
    HerokuSanError,
    InvalidMaintenanceAction,
    MissingApplication,
)
from .git import GitHelper
from .shell import clean_environment, sh

logger = structlog.get_logger()


class MaintenanceAction(str, Enum):
    """Direct maintenance toggles."""

    ON = "on"
    OFF = "off"


MAINTENANCE_MODES = {
    MaintenanceAction.ON: "1",
    MaintenanceAction.OFF: "0",
}


class Stage:
    """One deployment environment (production, staging, ...) of an app.

    Settings come from the stage's entry in the configuration file:

        app:     Heroku app name (required)
        repo:    git remote, defaults to git@heroku.com:<app>.git
        stack:   Heroku stack, defaults to the app's current stack
        tag:     tag glob deployed when no revision is given
        config:  config vars pushed by `push_config`
        addons:  add-ons reconciled by `install_addons`
        deploy:  deploy strategy, injected by the configuration loader

    Derived values are resolved on first access and cached for the life of
    the instance. Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        name: str,
        options: Optional[Dict[str, Any]] = None,
        settings: Optional[SanSettings] = None,
        api: Optional[HerokuAPI] = None,
        git: Optional[GitHelper] = None,
    ):
        """Initialize a stage.

        Args:
            name: Stage name
            options: Raw settings for this stage
            settings: Tool settings (environment based when omitted)
            api: Heroku API client (built from settings when omitted)
            git: Git helper
        """
        self.name = name
        self._options = dict(options or {})
        self.settings = settings or SanSettings()
        self._api = api
        self.git = git or GitHelper()
        self.deploy_strategy: Optional[DeployStrategy] = self._options.get("deploy")

    def __repr__(self) -> str:
        return f"<Stage {self.name!r} app={self._options.get('app')!r}>"

    @property
    def options(self) -> Dict[str, Any]:
        """The raw settings this stage was built from (a copy)."""
        return dict(self._options)

    @cached_property
    def heroku(self) -> HerokuAPI:
        """Heroku API client for this stage."""
        return self._api or HerokuAPI.from_settings(self.settings)

    # -- settings ----------------------------------------------------------

    @cached_property
    def app_name(self) -> str:
        app = self._options.get("app")
        if not app:
            raise MissingApplication(
                f"{self.name}: is missing the app: configuration value. "
                "I don't know what to access on Heroku."
            )
        return app

    @cached_property
    def repo_url(self) -> str:
        return self._options.get("repo") or f"git@{self.settings.git_host}:{self.app_name}.git"

    @cached_property
    def stack(self) -> str:
        """Configured stack, or the stack Heroku currently runs the app on."""
        if self._options.get("stack"):
            return self._options["stack"]

        stacks = [StackInfo(**entry) for entry in self.heroku.get_stack(self.app_name).body]
        current = next((stack for stack in stacks if stack.current), None)
        if current is None:
            raise HerokuSanError(f"{self.name}: Heroku reports no current stack for {self.app_name}")

        logger.debug("stage.stack_resolved", stage=self.name, stack=current.name)
        return current.name

    @cached_property
    def tag(self) -> Optional[str]:
        return self._options.get("tag")

    @cached_property
    def config_vars(self) -> Dict[str, Any]:
        return {str(key): value for key, value in (self._options.get("config") or {}).items()}

    @cached_property
    def addons(self) -> List[str]:
        """Desired add-ons; one level of nesting (YAML aliases) is flattened.

        A single add-on given as a plain string counts as a one-item list.
        """
        addons = self._options.get("addons") or []
        if isinstance(addons, str):
            addons = [addons]

        flattened = []
        for item in addons:
            if isinstance(item, (list, tuple)):
                flattened.extend(item)
            else:
                flattened.append(item)
        return flattened

    # -- commands ----------------------------------------------------------

    def run(self, command: str, args: Optional[str] = None) -> str:
        """Run a one-off command on a dyno."""
        line = " ".join(part for part in (command, args) if part)
        if re.search(self.settings.modern_stack_pattern, self.stack):
            return self._sh_heroku(f"run {line}", capture=False)
        return self._sh_heroku(f"run:{line}", capture=False)

    def rake(self, *args: str) -> str:
        return self.run("rake", " ".join(args))

    def deploy(self, revision: Optional[str] = None, force: bool = False) -> str:
        """Push `revision` (or the newest commit matching the tag) to Heroku."""
        revision = revision or self.git.parsed_tag(self.tag)
        flags = ["--force"] if force else []
        logger.info("stage.deploy.starting", stage=self.name, revision=revision, force=bool(force))
        return self.git.push(revision, self.repo_url, flags)

    def release(self, revision: Optional[str] = None, force: bool = False) -> DeploymentResult:
        """Run this stage's deploy strategy."""
        if not isinstance(self.deploy_strategy, DeployStrategy):
            raise ConfigurationError(f"{self.name}: no deploy strategy configured")
        logger.info("stage.release.starting", stage=self.name, strategy=self.deploy_strategy.name)
        return self.deploy_strategy.execute(self, revision, force)

    def migrate(self) -> Optional[str]:
        """Run db:migrate, then restart. No restart if the migration fails."""
        self.rake("db:migrate")
        return self.restart()

    def maintenance(self, action: Union[MaintenanceAction, str]):
        """Turn maintenance mode on or off.

        Raises:
            InvalidMaintenanceAction: If `action` is not on/off; no request is made
        """
        if isinstance(action, MaintenanceAction):
            resolved = action
        else:
            try:
                resolved = MaintenanceAction(action.lower())
            except (AttributeError, ValueError):
                raise InvalidMaintenanceAction(
                    f"Action {action!r} must be one of (on, off)"
                ) from None

        logger.info("stage.maintenance", stage=self.name, action=resolved.value)
        return self.heroku.post_app_maintenance(self.app_name, MAINTENANCE_MODES[resolved])

    @contextmanager
    def maintenance_mode(self) -> Iterator["Stage"]:
        """Keep the app in maintenance mode for the duration of the block."""
        self.heroku.post_app_maintenance(self.app_name, MAINTENANCE_MODES[MaintenanceAction.ON])
        logger.info("stage.maintenance.enabled", stage=self.name)
        try:
            yield self
        finally:
            self.heroku.post_app_maintenance(self.app_name, MAINTENANCE_MODES[MaintenanceAction.OFF])
            logger.info("stage.maintenance.disabled", stage=self.name)

    def create(self) -> str:
        """Create the app on Heroku and return the name Heroku gave it.

        The cached `app_name` is left alone; when `app:` is unset the returned
        name is the only record of the new app.
        """
        params = {key: value for key, value in self._options.items() if key in ("app", "stack") and value}
        if "app" in params:
            params["name"] = params.pop("app")

        response = self.heroku.post_app(params)
        app = AppInfo(**response.body)
        logger.info("stage.created", stage=self.name, app=app.name)
        return app.name

    def sharing_add(self, email: str) -> str:
        return self._sh_heroku(f"sharing:add {email.rstrip()}")

    def sharing_remove(self, email: str) -> str:
        return self._sh_heroku(f"sharing:remove {email.rstrip()}")

    def long_config(self) -> Dict[str, str]:
        """All config vars currently set on Heroku."""
        return self.heroku.get_config_vars(self.app_name).body

    def push_config(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Send `overrides` (or the stage's config vars) to Heroku.

        Returns:
            The app's full config after Heroku applied the update
        """
        params = overrides if overrides is not None else self.config_vars
        params = {str(key): value for key, value in params.items()}
        logger.info("stage.config.push", stage=self.name, keys=sorted(params))
        return self.heroku.put_config_vars(self.app_name, params).body

    def installed_addons(self) -> List[Dict[str, Any]]:
        return self.heroku.get_addons(self.app_name).body

    def install_addon(self, addon: str):
        try:
            return self.heroku.post_addon(self.app_name, addon)
        except HerokuAPIError as e:
            raise AddonInstallFailure(addon, e.message) from e

    def install_addons(self) -> Optional[List[Dict[str, Any]]]:
        """Install the configured add-ons that are missing on Heroku.

        Each install is attempted independently; a failure is logged and the
        remaining add-ons are still tried.

        Returns:
            The add-on list reported by Heroku afterwards, or None when the
            stage configures no add-ons
        """
        if not self.addons:
            return None

        installed = self.installed_addons()
        installed_names = {AddonInfo(**addon).name for addon in installed}
        missing = [addon for addon in self.addons if addon not in installed_names]
        if not missing:
            return installed

        for addon in missing:
            try:
                self.install_addon(addon)
                logger.info("stage.addon.installed", stage=self.name, addon=addon)
            except Exception as e:
                logger.warning("stage.addon.install_failed", stage=self.name, addon=addon, error=str(e))

        return self.installed_addons()

    def restart(self) -> Optional[str]:
        if self.heroku.post_ps_restart(self.app_name).body == "ok":
            logger.info("stage.restarted", stage=self.name)
            return "restarted"
        return None

    def logs(self, tail: bool = False) -> str:
        return self._sh_heroku("logs --tail" if tail else "logs", capture=False)

    def revision(self) -> str:
        """Named revision currently deployed, "" if the stage was never pushed."""
        return self.git.named_rev(self.git.remote_revision(self.repo_url))

    def _sh_heroku(self, command: str, capture: bool = True) -> str:
        return sh(
            f"{self.settings.cli_binary} {command} --app {self.app_name}",
            env=clean_environment(),
            capture=capture,
        )
