"""
nginx-vhost CLI - plan, apply and render vhost definitions.

Commands:
    nginx-vhost plan <config.py>            - Show what would change
    nginx-vhost apply <config.py>           - Apply configuration
    nginx-vhost render <config.py> [NAME]   - Print the merged vhost config
    nginx-vhost platform-info               - Show detected platform
    nginx-vhost version                     - Show version

A config file is plain Python defining ``vhosts`` (a list of VhostParams or
dicts) and optionally ``settings`` (a Settings instance).
"""

import click
import sys
import importlib.util
from pathlib import Path
from types import ModuleType
from typing import Optional

from nginx_vhost.core.executor import Executor, PlanResult
from nginx_vhost.core.resource import Action, Platform
from nginx_vhost.errors import VhostError
from nginx_vhost.logging import setup_logging
from nginx_vhost.resources.concat import merge_fragments
from nginx_vhost.vhost import Settings, Vhost, declare_all


@click.group(invoke_without_command=True)
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Log level')
@click.pass_context
def cli(ctx, log_level: str):
    """nginx-vhost - generate nginx virtual hosts from Python definitions."""
    setup_logging(log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
def plan(config_file: str):
    """
    Show what would change without applying.

    Example:
        nginx-vhost plan sites.py
    """
    click.echo(f"Planning {config_file}...\n")
    executor = _build_executor(config_file)
    plan_result = executor.plan()

    _report_plan_errors(plan_result)

    if not plan_result.has_changes:
        click.secho("No changes needed.", fg="green")
        return

    click.echo("nginx-vhost will perform the following actions:\n")

    for resource_id, resource_plan in plan_result.plans.items():
        if not resource_plan.has_changes():
            continue
        _display_plan(resource_id, resource_plan)

    click.echo(f"\nPlan: {plan_result.change_count} to change")
    click.echo(f"\nRun 'nginx-vhost apply {config_file}' to apply these changes.")


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
def apply(config_file: str, yes: bool):
    """
    Apply configuration changes and reload nginx if anything changed.

    Example:
        nginx-vhost apply sites.py --yes
    """
    click.echo(f"Planning {config_file}...\n")
    executor = _build_executor(config_file)
    plan_result = executor.plan()

    _report_plan_errors(plan_result)

    if not plan_result.has_changes:
        click.secho("No changes needed.", fg="green")
        return

    click.echo(f"Applying {plan_result.change_count} changes...\n")

    if not yes:
        if not click.confirm("Proceed with apply?"):
            click.echo("Aborted.")
            return

    apply_result = executor.apply(plan_result)

    click.echo()
    for resource_id in apply_result.changed_resources:
        resource_plan = plan_result.plans.get(resource_id)
        if resource_plan:
            symbol = _action_symbol(resource_plan.action)
            click.echo(f"  {symbol} {resource_id} ... ", nl=False)
            click.secho("✓ Done", fg="green")

    for service_id in apply_result.reloaded_services:
        click.echo(f"  ⟳ {service_id} reloaded")

    if apply_result.errors:
        click.secho("\nErrors during apply:", fg="red")
        for error in apply_result.errors:
            click.secho(f"  ! {error}", fg="red")
        sys.exit(1)

    click.secho(f"\nApply complete! ({apply_result.duration:.2f}s)", fg="green")


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('name', required=False)
def render(config_file: str, name: Optional[str]):
    """
    Print the merged config of every vhost (or just NAME).

    Example:
        nginx-vhost render sites.py app.example.com
    """
    module = _load_module(config_file)
    platform = Platform.detect()
    settings = _settings_from(module, platform)

    try:
        vhosts = [Vhost(d, settings, platform) for d in getattr(module, "vhosts", [])]
        if name is not None:
            vhosts = [v for v in vhosts if v.name == name]
            if not vhosts:
                click.secho(f"No vhost named {name} in {config_file}", fg="red")
                sys.exit(1)

        for vhost in vhosts:
            declaration = vhost.evaluate()
            click.secho(f"# ---- {declaration.vhost.config_file}", fg="cyan", err=True)
            click.echo(merge_fragments(declaration.fragments, vhost.renderer), nl=False)
    except VhostError as e:
        click.secho(f"Configuration error: {e}", fg="red")
        sys.exit(e.exit_code)


@cli.command()
def version():
    """Show nginx-vhost version."""
    from nginx_vhost import __version__
    click.echo(f"nginx-vhost version {__version__}")


@cli.command()
def platform_info():
    """Show detected platform information."""
    plat = Platform.detect()
    click.echo("Platform Information:")
    click.echo(f"  System:  {plat.system}")
    click.echo(f"  Distro:  {plat.distro}")
    click.echo(f"  Version: {plat.version}")
    click.echo(f"  Arch:    {plat.arch}")
    click.echo(f"  IPv6:    {'yes' if plat.has_ipv6 else 'no'}")


def _build_executor(config_file: str) -> Executor:
    """Load the config file and declare its vhosts on a fresh executor."""
    module = _load_module(config_file)
    executor = Executor()
    settings = _settings_from(module, executor.platform)

    try:
        declare_all(getattr(module, "vhosts", []), settings, executor)
    except VhostError as e:
        click.secho(f"Configuration error: {e}", fg="red")
        sys.exit(e.exit_code)

    return executor


def _load_module(config_file: str) -> ModuleType:
    """
    Load Python config file.

    The config file is executed as a Python module.
    """
    config_path = Path(config_file).resolve()

    try:
        spec = importlib.util.spec_from_file_location("vhost_config", config_path)
        if spec is None or spec.loader is None:
            raise ValueError(f"Could not load config: {config_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        click.secho(f"Error loading config: {e}", fg="red")
        sys.exit(1)

    return module


def _settings_from(module: ModuleType, platform: Platform) -> Settings:
    settings = getattr(module, "settings", None)
    if isinstance(settings, Settings):
        return settings
    return Settings.from_env(platform)


def _report_plan_errors(plan_result: PlanResult) -> None:
    if plan_result.has_errors:
        click.secho("Errors during planning:", fg="red")
        for error in plan_result.errors:
            click.secho(f"  ! {error}", fg="red")
        click.echo()


def _display_plan(resource_id: str, plan) -> None:
    """Display a single resource plan."""
    symbol = _action_symbol(plan.action)
    click.echo(f"  {symbol} {resource_id}")

    if plan.reason:
        click.echo(f"      reason: {plan.reason}")

    for change in plan.changes:
        if change.field == "content":
            click.echo(f"      content: {_summarize(change.from_value)} → {_summarize(change.to_value)}")
        else:
            click.echo(f"      {change.field}: {change.from_value} → {change.to_value}")

    click.echo()


def _summarize(content: Optional[str]) -> str:
    if content is None:
        return "None"
    return f"<{len(content.splitlines())} lines>"


def _action_symbol(action: Action) -> str:
    """Get symbol for action."""
    if action == Action.CREATE:
        return click.style("+", fg="green")
    elif action == Action.UPDATE:
        return click.style("~", fg="yellow")
    elif action == Action.DELETE:
        return click.style("-", fg="red")
    else:
        return " "


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
