"""healthdash CLI entry point."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from healthdash.config.models import DashboardConfig

app = typer.Typer(
    name="healthdash",
    help="healthdash: per-service, per-region health dashboard",
    no_args_is_help=True,
)
console = Console()

ConfigPath = typer.Option(None, "--config", "-c", help="Path to .healthdash.yaml")


def _load(path: Path | None) -> DashboardConfig:
    from healthdash.config.loader import load_config_or_default

    try:
        return load_config_or_default(path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


def _check_provider(provider: str | None) -> None:
    from healthdash.dashboard.view import PROVIDERS

    if provider is not None and provider not in PROVIDERS:
        console.print(f"[red]Unknown provider: {provider}[/red]")
        console.print(f"Available: {', '.join(PROVIDERS)}")
        raise typer.Exit(1)


@app.command()
def status(
    provider: str | None = typer.Option(None, "--provider", "-p", help="AWS, DCC or Azure"),
    expand: list[str] = typer.Option([], "--expand", "-e", help="Service to drill into (repeatable)"),
    config_path: Path | None = ConfigPath,
) -> None:
    """Fetch the health snapshot once and print the dashboard."""
    from healthdash.dashboard.layout import build_layout
    from healthdash.dashboard.render import render_dashboard
    from healthdash.dashboard.view import DashboardView

    _check_provider(provider)
    config = _load(config_path)
    view = DashboardView(config)
    if provider:
        view.select_provider(provider)
    for name in expand:
        view.toggle_expansion(name)

    loaded = asyncio.run(view.load_snapshot())
    console.print(render_dashboard(build_layout(view)))
    if not loaded:
        raise typer.Exit(1)


@app.command()
def watch(
    provider: str | None = typer.Option(None, "--provider", "-p", help="AWS, DCC or Azure"),
    interval: float | None = typer.Option(None, "--interval", "-i", help="Seconds between refreshes"),
    iterations: int = typer.Option(0, help="Stop after this many refreshes (0 = run until Ctrl+C)"),
    config_path: Path | None = ConfigPath,
) -> None:
    """Keep the dashboard on screen, refreshing the table periodically."""
    from rich.live import Live

    from healthdash.dashboard.layout import build_layout
    from healthdash.dashboard.render import render_dashboard
    from healthdash.dashboard.view import DashboardView

    _check_provider(provider)
    config = _load(config_path)
    view = DashboardView(config)
    if provider:
        view.select_provider(provider)
    delay = interval if interval is not None else config.refresh_interval

    async def _run() -> None:
        await view.load_snapshot()
        with Live(render_dashboard(build_layout(view)), console=console, refresh_per_second=4) as live:
            done = 0
            while iterations == 0 or done < iterations:
                await asyncio.sleep(delay)
                await view.refresh_table()
                live.update(render_dashboard(build_layout(view)))
                done += 1

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8000, help="Bind port"),
    config_path: Path | None = ConfigPath,
) -> None:
    """Start the dashboard API server."""
    import uvicorn

    from healthdash.api.app import create_app

    config = _load(config_path)
    console.print(f"[bold]healthdash[/bold] starting on http://{host}:{port}")
    console.print(f"  Endpoint: {config.endpoint_url}")
    uvicorn.run(create_app(config=config), host=host, port=port, reload=False)


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .healthdash.yaml"),
) -> None:
    """Validate configuration file."""
    from urllib.parse import urlparse

    import yaml

    from healthdash.config.loader import load_config

    try:
        config = load_config(path=path)
        console.print("[green]✓[/green] YAML parses correctly")
        console.print("[green]✓[/green] Pydantic validation passes")
    except FileNotFoundError as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]✗ YAML parsing failed: {exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print("[green]✓[/green] YAML parses correctly")
        console.print(f"[red]✗ Pydantic validation failed: {exc}[/red]")
        raise typer.Exit(1)

    parsed = urlparse(config.endpoint_url)
    if not parsed.scheme or not parsed.netloc:
        console.print(f"[red]✗ Invalid endpoint URL '{config.endpoint_url}'[/red]")
        console.print("\n[red bold]1 validation error(s) found.[/red bold]")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Endpoint URL is valid")
    if config.timeout is None:
        console.print("[yellow]! No fetch timeout: a hung request keeps its loading flag set[/yellow]")
    console.print("\n[green bold]Configuration is valid.[/green bold]")


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .healthdash.yaml"),
) -> None:
    """Print resolved configuration."""
    config = _load(path)

    console.print(f"[bold]{config.dashboard.name}[/bold] v{config.dashboard.version}\n")
    console.print(f"  Endpoint: {config.endpoint_url}")
    timeout = f"{config.timeout}s" if config.timeout is not None else "none"
    console.print(f"  Timeout: {timeout}")
    console.print(f"  Default provider: {config.default_provider}")
    console.print(f"  Race policy: {config.race_policy}")
    console.print(f"  Refresh interval: {config.refresh_interval}s")
    console.print(f"  Event log size: {config.event_log_size}")


def main() -> None:
    app()
