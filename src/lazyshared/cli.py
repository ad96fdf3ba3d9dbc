import click
from rich.console import Console
from rich.table import Table

# Create console instance
console = Console()


@click.group()
def cli():
    """lazyshared CLI - Inspect and demonstrate lazily shared instances."""
    pass


@cli.command("demo")
@click.option(
    "--workers",
    "-w",
    default=None,
    type=int,
    help="Number of threads racing on first access (default: DEMO_WORKERS setting).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging (DEBUG level) for detailed output.",
)
def demo(workers: int | None = None, verbose: bool = False):
    """Race several threads on a shared resource and show what each one saw."""
    from lazyshared.demo import DemoResource, run_demo

    if verbose:
        from lazyshared.config.logging_config import set_log_level

        set_log_level("DEBUG")
        console.print("[cyan]Verbose logging enabled (DEBUG level)[/]")

    try:
        results = run_demo(workers)
    except Exception as e:
        console.print(f"[red]Demo failed: {e}[/]")
        raise SystemExit(1)

    table = Table(title="Shared resource demo")
    table.add_column("Worker", style="cyan")
    table.add_column("Message", style="green")
    table.add_column("Resource ID", style="yellow")

    for result in results:
        table.add_row(str(result.worker), result.message, result.resource_id)

    console.print(table)

    distinct = len({result.object_id for result in results})
    console.print(
        f"{len(results)} workers observed {distinct} distinct instance(s); "
        f"{DemoResource.created} constructed"
    )


@cli.group()
def settings():
    """Commands for inspecting lazyshared settings."""
    pass


@settings.command("show")
def show_settings():
    """Show registered settings and their current values."""
    from lazyshared.config.configuration import get_settings_registry
    from lazyshared.config.environment import Environment
    from lazyshared.config.settings import SETTINGS_FILE, get_system_file_path

    settings_path = get_system_file_path(SETTINGS_FILE)
    if Environment.has_settings():
        console.print(f"Settings file: {settings_path}", soft_wrap=True)
    else:
        console.print(f"No settings file at {settings_path}, using environment and defaults", soft_wrap=True)

    table = Table(title="Settings")

    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Description", style="yellow")

    for setting in get_settings_registry():
        value = Environment.get(setting.env_var, setting.default)
        table.add_row(setting.env_var, "" if value is None else str(value), setting.description)

    console.print(table)


if __name__ == "__main__":
    cli()
