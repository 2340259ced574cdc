"""Rich renderables for the terminal dashboard."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from healthdash.dashboard.layout import DashboardLayout, DetailCell, StatusCell

_STATUS_STYLES = {
    "healthy": ("✓", "green"),
    "unhealthy": ("✗", "red"),
}


def status_text(cell: StatusCell) -> Text:
    if cell.status is None:
        return Text(cell.label, style="dim")
    icon, style = _STATUS_STYLES.get(cell.status, ("!", "bright_black"))
    return Text(f"{icon} {cell.status}", style=style)


def detail_text(cell: DetailCell) -> Text:
    if not cell.available:
        return Text("Service not available", style="dim")
    text = Text(f"v{cell.version}  Replicas: {cell.replicas}")
    if cell.updated_at is not None:
        text.append(f"  Updated {cell.updated_at.astimezone().strftime('%H:%M:%S')}", style="dim")
    if cell.is_refreshing:
        text.append("  refreshing…", style="yellow")
    return text


def render_tabs(layout: DashboardLayout) -> Text:
    tabs = Text()
    for i, provider in enumerate(layout.providers):
        if i:
            tabs.append("  ")
        if provider == layout.provider:
            tabs.append(f"[{provider}]", style="bold blue underline")
        else:
            tabs.append(provider, style="bright_black")
    return tabs


def render_banner(layout: DashboardLayout) -> Text:
    style = "bold green" if layout.all_healthy else "bold red"
    banner = Text(layout.banner, style=style)
    banner.append(f"\nLast refreshed {layout.last_refreshed}", style="dim")
    return banner


def render_table(layout: DashboardLayout) -> Table:
    table = Table(title="Service Health Status")
    table.add_column("Service", style="bold")
    for header in layout.regions:
        table.add_column(Text.assemble(header.region, "\n", (header.cluster_name, "dim")))

    for row in layout.rows:
        marker = "▾" if row.expanded else "▸"
        table.add_row(Text(f"{marker} {row.display_name}"), *(status_text(c) for c in row.cells))
        if row.expanded and row.details:
            table.add_row("", *(detail_text(d) for d in row.details), style="on grey11")
    return table


def render_dashboard(layout: DashboardLayout) -> RenderableType:
    """The whole dashboard: banner, provider tabs, table and any error."""
    if not layout.has_data:
        if layout.error:
            return Text(layout.error, style="red")
        return Text("Loading service health status...")

    parts: list[RenderableType] = [render_banner(layout), render_tabs(layout)]
    if layout.error:
        parts.append(Text(layout.error, style="red"))
    if layout.table_loading:
        parts.append(Text("Refreshing table data...", style="dim"))
    else:
        parts.append(render_table(layout))
    return Group(*parts)
