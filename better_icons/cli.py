#!/usr/bin/env python3
"""better-icons - icon search MCP server and setup CLI."""

import json
from typing import Optional

import questionary
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from better_icons import PACKAGE_NAME, __version__
from better_icons.agents import (
    AgentConfig,
    get_agent_configs,
    get_mcp_server_config,
    install_agent,
    shorten_path,
)
from better_icons.server import LOG_LEVELS, configure_logging, run_server
from better_icons.storage import StorageManager
from better_icons.tools import time_ago

# Config setting descriptions
CONFIG_DESCRIPTIONS = {
    "api_url": "Iconify API root used for search and icon data",
    "request_timeout": "Seconds to wait for an Iconify response",
    "log_level": "Server log level (DEBUG, INFO, WARNING, ERROR); logs go to stderr",
}

app = typer.Typer(
    name=PACKAGE_NAME,
    help="MCP server for searching icons from 200+ libraries",
    add_completion=True,
    no_args_is_help=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)

# Preferences subcommand group for what the server has learned
preferences_app = typer.Typer(
    name="preferences",
    help="View and manage learned icon preferences",
    rich_markup_mode="rich",
    invoke_without_command=True,
)
app.add_typer(preferences_app, name="preferences")

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{PACKAGE_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """MCP server for searching icons from 200+ libraries."""
    configure_logging("WARNING")
    # MCP clients launch the bare command, so no subcommand means serve
    if ctx.invoked_subcommand is None:
        run_server()


# Rich formatting helpers
def info(text: str) -> str:
    return f"[cyan]{text}[/cyan]"


def error(text: str) -> str:
    return f"[red]{text}[/red]"


def success(text: str) -> str:
    return f"[green]{text}[/green]"


def warning(text: str) -> str:
    return f"[yellow]{text}[/yellow]"


@app.command(hidden=True)
def serve() -> None:
    """Run the MCP server on stdio."""
    run_server()


def _select_agents(agents: list[AgentConfig], names: Optional[list[str]], yes: bool) -> list[AgentConfig]:
    """Resolve which agents to configure from flags or an interactive prompt."""
    if names:
        valid = [a.name for a in agents]
        invalid = [n for n in names if n not in valid]
        if invalid:
            console.print(error(f"Invalid agents: {', '.join(invalid)}"))
            console.print(info(f"Valid agents: {', '.join(valid)}"))
            raise typer.Exit(code=1)
        return [a for a in agents if a.name in names]

    detected = [a for a in agents if a.detected]

    if yes:
        targets = detected or agents
        console.print(info(f"Installing to: {', '.join(a.display_name for a in targets)}"))
        return targets

    selected = questionary.checkbox(
        "Select agents to configure (space to toggle):",
        choices=[
            questionary.Choice(
                f"{a.display_name} ({'detected' if a.detected else 'not detected'})",
                value=a.name,
                checked=a.detected,
            )
            for a in agents
        ],
    ).ask()

    if selected is None:
        console.print(warning("Setup cancelled"))
        raise typer.Exit(code=0)

    return [a for a in agents if a.name in selected]


@app.command()
def setup(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompts",
    ),
    agent: Optional[list[str]] = typer.Option(
        None,
        "--agent",
        "-a",
        help="Agent to configure (cursor, claude-code, opencode, windsurf, vscode). Repeatable.",
    ),
) -> None:
    """Configure the MCP server for your coding agents.

    [bold cyan]EXAMPLES[/bold cyan]:
      [dim]$[/dim] better-icons setup                    [dim]# Pick agents interactively[/dim]
      [dim]$[/dim] better-icons setup -y                 [dim]# All detected agents[/dim]
      [dim]$[/dim] better-icons setup -a cursor -a vscode
    """
    console.print(Panel(
        "500,000+ icons from 200+ collections via Iconify",
        title=f"{PACKAGE_NAME} setup",
        border_style="cyan",
    ))

    agents = get_agent_configs()
    targets = _select_agents(agents, agent, yes)

    if not targets:
        console.print(warning("No agents selected"))
        raise typer.Exit(code=0)

    summary = []
    for a in targets:
        status = "[yellow](will update)[/yellow]" if a.config_path.exists() else "[green](will create)[/green]"
        summary.append(f"  [cyan]{a.display_name}[/cyan] → [dim]{shorten_path(a.config_path)}[/dim] {status}")
    console.print(Panel("\n".join(summary), title="Installation Summary", border_style="blue"))

    if not yes:
        confirmed = questionary.confirm("Proceed with installation?", default=True).ask()
        if not confirmed:
            console.print(warning("Setup cancelled"))
            raise typer.Exit(code=0)

    server_config = get_mcp_server_config()
    with console.status("Configuring MCP server..."):
        results = [install_agent(a, server_config) for a in targets]

    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    if succeeded:
        lines = [f"  [green]✓[/green] {r.agent} → [dim]{shorten_path(r.path)}[/dim]" for r in succeeded]
        console.print(Panel(
            "\n".join(lines),
            title=f"Configured {len(succeeded)} agent(s)",
            border_style="green",
        ))

    if failed:
        console.print(error(f"Failed to configure {len(failed)} agent(s)"))
        for r in failed:
            console.print(f"  [red]✗[/red] {r.agent}: [dim]{r.error}[/dim]")

    console.print(Panel(
        "[dim]Try asking your AI:[/dim]\n"
        '  [cyan]"Search for arrow icons"[/cyan]\n'
        '  [cyan]"Get the SVG for lucide:home"[/cyan]',
        title="Next Steps",
        border_style="blue",
    ))
    console.print(success("Restart your editor to load the MCP server"))

    if failed:
        raise typer.Exit(code=1)


@app.command()
def config(
    set_value: Optional[str] = typer.Option(
        None,
        "--set",
        help="Set a config value (key=value)",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Reset configuration to defaults",
    ),
) -> None:
    """Show manual MCP configuration and manage settings.

    [bold cyan]EXAMPLES[/bold cyan]:
      [dim]$[/dim] better-icons config                         [dim]# Show config[/dim]
      [dim]$[/dim] better-icons config --set request_timeout=10
      [dim]$[/dim] better-icons config --reset
    """
    storage = StorageManager()

    if reset:
        storage.reset_config()
        console.print(success("Configuration reset to defaults"))
        return

    if set_value:
        if "=" not in set_value:
            console.print(error("Invalid format. Use: --set key=value"))
            raise typer.Exit(code=1)

        key, value = set_value.split("=", 1)
        cfg = storage.load_config()

        if key not in cfg.to_dict():
            console.print(error(f"Unknown config key: {key}"))
            raise typer.Exit(code=1)

        if key == "request_timeout":
            try:
                value = float(value)
            except ValueError:
                console.print(error("request_timeout must be a number"))
                raise typer.Exit(code=1)
        elif key == "log_level":
            value = value.upper()
            if value not in LOG_LEVELS:
                console.print(error(f"log_level must be one of: {', '.join(LOG_LEVELS)}"))
                raise typer.Exit(code=1)

        setattr(cfg, key, value)
        storage.save_config(cfg)
        console.print(success(f"Set {key} = {value}"))
        return

    # Default: show manual setup and settings
    snippet = json.dumps({"mcpServers": get_mcp_server_config()}, indent=2)
    console.print(Panel(snippet, title="MCP Configuration", border_style="blue"))

    locations = [f"[cyan]{a.display_name}:[/cyan] {shorten_path(a.config_path)}" for a in get_agent_configs()]
    console.print(Panel("\n".join(locations), title="Config File Locations", border_style="blue"))

    cfg = storage.load_config()
    table = Table(title="Settings", show_lines=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Description", style="dim")

    for key, value in cfg.to_dict().items():
        table.add_row(key, str(value), CONFIG_DESCRIPTIONS.get(key, ""))

    console.print(table)
    console.print(f"\n[dim]Config file: {storage.config_path}[/dim]")


@preferences_app.callback()
def preferences_callback(ctx: typer.Context) -> None:
    """Show learned collection preferences.

    The server counts which collections you retrieve icons from and puts
    them first in search results and recommendations.
    """
    if ctx.invoked_subcommand is not None:
        return

    storage = StorageManager()
    store = storage.preference_store()
    prefs = store.load()
    ranked = store.ranked_collections()

    if not ranked:
        console.print("[dim]No icon preferences learned yet.[/dim]")
        console.print(f"\n[dim]Preferences file: {storage.preferences_path}[/dim]")
        return

    table = Table(title="Learned Collections", show_lines=True)
    table.add_column("Collection", style="cyan")
    table.add_column("Uses", style="white", justify="right")
    table.add_column("Last used", style="dim")

    for prefix in ranked:
        usage = prefs.collections[prefix]
        table.add_row(prefix, str(usage.count), time_ago(usage.last_used))

    console.print(table)
    console.print(f"\n[dim]Preferences file: {storage.preferences_path}[/dim]")

    console.print("\n[bold]Subcommands:[/bold]")
    console.print("  better-icons preferences history  # Recently used icons")
    console.print("  better-icons preferences clear    # Forget everything")


@preferences_app.command()
def history(
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        min=1,
        max=50,
        help="Number of icons to show",
    ),
) -> None:
    """Show recently retrieved icons."""
    storage = StorageManager()
    recent = storage.preference_store().recent_history(limit)

    if not recent:
        console.print("[dim]No icon history yet.[/dim]")
        return

    table = Table(title="Recent Icons", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Icon", style="cyan")
    table.add_column("When", style="white")

    for i, entry in enumerate(recent, 1):
        table.add_row(str(i), entry.icon_id, time_ago(entry.timestamp))

    console.print(table)


@preferences_app.command()
def clear(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Forget all learned preferences and history."""
    if not yes and not typer.confirm("Clear all learned preferences? This cannot be undone."):
        console.print(warning("Cancelled"))
        return

    StorageManager().preference_store().reset()
    console.print(success("Icon preferences cleared"))


def cli() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    cli()
