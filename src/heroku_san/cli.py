"""Command line interface."""

from typing import Tuple

import click

from . import __version__
from .client.platform import HerokuAPI
from .config import SanSettings
from .configuration import Configuration
from .exceptions import HerokuSanError
from .project import Project
from .utils.logging import setup_logging

STAGES = click.argument("stages", nargs=-1, required=True)


class SanGroup(click.Group):
    """Reports heroku-san errors as one-line CLI failures."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except HerokuSanError as e:
            raise click.ClickException(str(e)) from e


def _project(ctx: click.Context) -> Project:
    return ctx.find_object(Project)


@click.group(cls=SanGroup)
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Stage configuration file (default: config/heroku.yml)",
)
@click.pass_context
def cli(ctx, config_file):
    """Manage the Heroku stages of an application."""
    if isinstance(ctx.obj, Project):
        return
    settings = SanSettings()
    setup_logging(settings.log_level)
    api = HerokuAPI.from_settings(settings)
    ctx.call_on_close(api.close)
    ctx.obj = Project(Configuration(config_file, settings=settings), api=api)


@cli.command()
@click.pass_context
def stages(ctx):
    """List configured stages."""
    project = _project(ctx)
    for name, stage in project.stages.items():
        click.echo(f"{name}: {stage.options.get('app') or '(no app)'} [{stage.deploy_strategy.name}]")


@cli.command("generate-config")
@click.pass_context
def generate_config(ctx):
    """Write an example stage file."""
    configuration = _project(ctx).configuration
    if configuration.generate_config():
        click.echo(click.style(f"✓ Created {configuration.config_file}", fg="green"))
    else:
        click.echo(click.style(f"{configuration.config_file} already exists", fg="yellow"))


@cli.command()
@STAGES
@click.pass_context
def create(ctx, stages: Tuple[str, ...]):
    """Create the apps on Heroku."""
    results = _project(ctx).each_app(stages, lambda stage: stage.create())
    for name, app in results.items():
        click.echo(f"{name}: created {app}")


@cli.command()
@STAGES
@click.option("--revision", default=None, help="Commit to deploy instead of the stage tag")
@click.option("--force", is_flag=True, help="Force-push")
@click.pass_context
def deploy(ctx, stages: Tuple[str, ...], revision, force):
    """Deploy with each stage's strategy (push, then e.g. migrate)."""
    results = _project(ctx).each_app(stages, lambda stage: stage.release(revision, force))
    for name, result in results.items():
        click.echo(click.style(f"✓ {name}: {result.message}", fg="green"))


@cli.command()
@STAGES
@click.option("--revision", default=None, help="Commit to push instead of the stage tag")
@click.option("--force", is_flag=True, help="Force-push")
@click.pass_context
def push(ctx, stages: Tuple[str, ...], revision, force):
    """Push code only."""
    _project(ctx).each_app(stages, lambda stage: stage.deploy(revision, force))


@cli.command()
@STAGES
@click.pass_context
def migrate(ctx, stages: Tuple[str, ...]):
    """Run db:migrate and restart."""
    _project(ctx).each_app(stages, lambda stage: stage.migrate())


@cli.command()
@click.argument("action", type=click.Choice(["on", "off"]))
@STAGES
@click.pass_context
def maintenance(ctx, action, stages: Tuple[str, ...]):
    """Turn maintenance mode on or off."""
    _project(ctx).each_app(stages, lambda stage: stage.maintenance(action))
    click.echo(f"Maintenance mode {action}")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("stage")
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, stage, command, args):
    """Run a one-off command on a stage."""
    _project(ctx)[stage].run(command, " ".join(args) or None)


@cli.command()
@click.argument("stage")
@click.argument("args", nargs=-1, required=True)
@click.pass_context
def rake(ctx, stage, args):
    """Run a rake task on a stage."""
    _project(ctx)[stage].rake(*args)


@cli.group()
def config():
    """Config vars."""
    pass


@config.command("push")
@STAGES
@click.pass_context
def config_push(ctx, stages: Tuple[str, ...]):
    """Push the configured config vars to Heroku."""
    results = _project(ctx).each_app(stages, lambda stage: stage.push_config())
    for name, config_vars in results.items():
        click.echo(f"{name}: {len(config_vars)} config vars")


@config.command("pull")
@STAGES
@click.pass_context
def config_pull(ctx, stages: Tuple[str, ...]):
    """Print the config vars set on Heroku."""
    results = _project(ctx).each_app(stages, lambda stage: stage.long_config())
    for name, config_vars in results.items():
        click.echo(f"{name}:")
        for key, value in sorted(config_vars.items()):
            click.echo(f"  {key}: {value}")


@cli.command()
@STAGES
@click.pass_context
def addons(ctx, stages: Tuple[str, ...]):
    """Install missing add-ons."""
    results = _project(ctx).each_app(stages, lambda stage: stage.install_addons())
    for name, installed in results.items():
        if installed is None:
            click.echo(f"{name}: no add-ons configured")
        else:
            click.echo(f"{name}: {', '.join(addon['name'] for addon in installed)}")


@cli.command()
@STAGES
@click.pass_context
def restart(ctx, stages: Tuple[str, ...]):
    """Restart the app's processes."""
    results = _project(ctx).each_app(stages, lambda stage: stage.restart())
    for name, result in results.items():
        click.echo(f"{name}: {result or 'restart not confirmed'}")


@cli.command()
@click.argument("stage")
@click.option("--tail", is_flag=True, help="Keep streaming new log lines")
@click.pass_context
def logs(ctx, stage, tail):
    """Show a stage's logs."""
    _project(ctx)[stage].logs(tail)


@cli.command()
@STAGES
@click.pass_context
def revision(ctx, stages: Tuple[str, ...]):
    """Show the revision deployed to each stage."""
    results = _project(ctx).each_app(stages, lambda stage: stage.revision())
    for name, named_rev in results.items():
        click.echo(f"{name}: {named_rev or '(never deployed)'}")


@cli.group()
def sharing():
    """Collaborators."""
    pass


@sharing.command("add")
@click.argument("email")
@STAGES
@click.pass_context
def sharing_add(ctx, email, stages: Tuple[str, ...]):
    """Add a collaborator."""
    _project(ctx).each_app(stages, lambda stage: stage.sharing_add(email))


@sharing.command("remove")
@click.argument("email")
@STAGES
@click.pass_context
def sharing_remove(ctx, email, stages: Tuple[str, ...]):
    """Remove a collaborator."""
    _project(ctx).each_app(stages, lambda stage: stage.sharing_remove(email))
