"""Render model derived from a DashboardView on every render pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from healthdash.dashboard.view import (
    PROVIDERS,
    DashboardView,
    filter_by_provider,
    format_display_name,
    is_all_healthy,
)

ALL_OPERATIONAL = "All components are Operational"
DISRUPTION_DETECTED = "Service Disruption Detected"
NOT_AVAILABLE = "N/A"


@dataclass
class RegionHeader:
    region: str
    cluster_name: str


@dataclass
class StatusCell:
    region: str
    status: str | None  # None when the region does not report the service

    @property
    def label(self) -> str:
        return self.status or NOT_AVAILABLE


@dataclass
class DetailCell:
    region: str
    available: bool
    version: str | None = None
    replicas: int | None = None
    updated_at: datetime | None = None
    is_refreshing: bool = False


@dataclass
class ServiceRow:
    service_name: str
    display_name: str
    expanded: bool
    cells: list[StatusCell] = field(default_factory=list)
    details: list[DetailCell] = field(default_factory=list)


@dataclass
class DashboardLayout:
    """Everything a surface needs to draw the dashboard once."""

    provider: str
    loading: bool
    table_loading: bool
    error: str | None
    has_data: bool
    all_healthy: bool
    last_refreshed: str
    providers: tuple[str, ...] = PROVIDERS
    regions: list[RegionHeader] = field(default_factory=list)
    rows: list[ServiceRow] = field(default_factory=list)

    @property
    def banner(self) -> str:
        return ALL_OPERATIONAL if self.all_healthy else DISRUPTION_DETECTED

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "providers": list(self.providers),
            "loading": self.loading,
            "table_loading": self.table_loading,
            "error": self.error,
            "has_data": self.has_data,
            "all_healthy": self.all_healthy,
            "banner": self.banner,
            "last_refreshed": self.last_refreshed,
            "regions": [{"region": r.region, "cluster_name": r.cluster_name} for r in self.regions],
            "rows": [
                {
                    "service_name": row.service_name,
                    "display_name": row.display_name,
                    "expanded": row.expanded,
                    "cells": [{"region": c.region, "status": c.label} for c in row.cells],
                    "details": [
                        {
                            "region": d.region,
                            "available": d.available,
                            "version": d.version,
                            "replicas": d.replicas,
                            "updated_at": d.updated_at.isoformat() if d.updated_at else None,
                            "is_refreshing": d.is_refreshing,
                        }
                        for d in row.details
                    ],
                }
                for row in self.rows
            ],
        }


def build_layout(view: DashboardView, provider: str | None = None) -> DashboardLayout:
    """Derive the render model for *provider* (default: the selected tab).

    Rows come from every region of the snapshot, not only the visible ones,
    so a service missing from the visible regions still gets a row of N/A.
    """
    provider = view.selected_provider if provider is None else provider
    regions = filter_by_provider(view.regions, provider)

    rows: list[ServiceRow] = []
    for name in view.all_service_names():
        expanded = name in view.expanded_service_names
        row = ServiceRow(service_name=name, display_name=format_display_name(name), expanded=expanded)
        refresh_state = view.service_refresh_states.get(name)
        for region in regions:
            service = region.find_service(name)
            row.cells.append(StatusCell(region=region.region, status=service.status_label if service else None))
            if not expanded:
                continue
            if service is None:
                row.details.append(DetailCell(region=region.region, available=False))
            else:
                row.details.append(
                    DetailCell(
                        region=region.region,
                        available=True,
                        version=service.version,
                        replicas=service.replicas,
                        updated_at=refresh_state.last_refreshed_at if refresh_state else None,
                        is_refreshing=refresh_state.is_refreshing if refresh_state else False,
                    )
                )
        rows.append(row)

    return DashboardLayout(
        provider=provider,
        loading=view.loading,
        table_loading=view.table_loading,
        error=view.error,
        has_data=view.snapshot is not None,
        all_healthy=is_all_healthy(regions),
        last_refreshed=view.time_since_last_refresh(),
        regions=[RegionHeader(region=r.region, cluster_name=r.cluster_name) for r in regions],
        rows=rows,
    )
