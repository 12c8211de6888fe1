"""Command line interface for inspecting and dispatching hooks.

Registration modules expose ``register(manager)``; the CLI imports the module,
lets it register its callbacks on a fresh manager, then dispatches or lists
hooks.
"""

from __future__ import annotations

import importlib

import click

from core import __version__
from core.config import ConfigManager, EngineConfig
from core.exceptions import ConfigError, InvalidCallbackError
from core.logger import setup_logging
from hooks.manager import HookManager


def _load_manager(module: str, config_path: str | None) -> HookManager:
    config = EngineConfig()
    if config_path is not None:
        try:
            config = ConfigManager().load(config_path)
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc
        setup_logging(config.logging)

    try:
        target = importlib.import_module(module)
    except ImportError as exc:
        raise click.ClickException(f"Cannot import module: {module}") from exc

    register = getattr(target, "register", None)
    if not callable(register):
        raise click.ClickException(f"Module {module} has no register(manager) function")

    manager = HookManager.from_config(config)
    register(manager)
    return manager


@click.group()
@click.version_option(version=__version__, prog_name="hooks")
def cli() -> None:
    """Hook Engine CLI"""


@cli.command()
@click.argument("module")
@click.argument("hook")
@click.argument("args", nargs=-1)
@click.option("--filter", "as_filter", is_flag=True, help="Dispatch as a filter")
@click.option("--value", default=None, help="Initial value for --filter")
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
def dispatch(
    module: str,
    hook: str,
    args: tuple[str, ...],
    as_filter: bool,
    value: str | None,
    config: str | None,
) -> None:
    """Dispatch HOOK after loading callbacks from MODULE"""
    manager = _load_manager(module, config)

    if as_filter:
        result = manager.dispatch_filter(hook, value, *args)
        click.echo(f"value={result!r}")
    else:
        manager.dispatch_action(hook, *args)

    click.echo(f"invocations={manager.invocation_count(hook)}")


@cli.command()
@click.argument("module")
@click.argument("hook", required=False)
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
def inspect(module: str, hook: str | None, config: str | None) -> None:
    """List callbacks registered by MODULE in dispatch order"""
    manager = _load_manager(module, config)
    names = [hook] if hook is not None else sorted(manager.registry.hook_names())

    for name in names:
        click.echo(name)
        for entry in manager.registry.callbacks(name):
            try:
                identity = entry.identity
            except InvalidCallbackError:
                identity = f"<not callable: {entry.callback!r}>"
            click.echo(f"  {entry.priority:>5}  {entry.accepted_args:>3}  {identity}")


if __name__ == "__main__":
    cli()
