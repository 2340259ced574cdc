"""Dashboard view: snapshot fetch lifecycle, provider filtering and row state."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial

from healthdash.config.models import DashboardConfig
from healthdash.events.emitter import (
    REFRESH_COMPLETED,
    REFRESH_DISCARDED,
    REFRESH_FAILED,
    REFRESH_STARTED,
    EventEmitter,
    RefreshEvent,
)
from healthdash.snapshot.client import fetch_snapshot
from healthdash.snapshot.models import HealthSnapshot, RegionStatus

logger = logging.getLogger(__name__)

PROVIDERS: tuple[str, ...] = ("AWS", "DCC", "Azure")
DCC_CLUSTER_NAME = "DCC-Production"
FETCH_ERROR_MESSAGE = "Failed to fetch service health data"

# outcomes of a single fetch
APPLIED = "applied"
DISCARDED = "discarded"
FAILED = "failed"

Fetcher = Callable[[], Awaitable[HealthSnapshot]]


@dataclass
class ServiceRefreshState:
    """Per-service refresh bookkeeping shown in the drill-down row."""

    is_refreshing: bool = False
    last_refreshed_at: datetime | None = None


def filter_by_provider(regions: Iterable[RegionStatus], provider: str) -> list[RegionStatus]:
    """Regions visible under a provider tab. Unknown providers see nothing."""
    if provider == "AWS":
        return [
            r for r in regions if r.csp.lower() == "aws" and r.cluster_name != DCC_CLUSTER_NAME
        ]
    if provider == "DCC":
        return [r for r in regions if r.cluster_name == DCC_CLUSTER_NAME]
    if provider == "Azure":
        return [r for r in regions if r.csp.lower() == "azure"]
    return []


def all_service_names(regions: Iterable[RegionStatus]) -> list[str]:
    """Every service name reported by any region, in first-seen order."""
    seen: dict[str, None] = {}
    for region in regions:
        for service in region.services:
            seen.setdefault(service.service_name, None)
    return list(seen)


def is_all_healthy(regions: Iterable[RegionStatus]) -> bool:
    return all(service.is_healthy for region in regions for service in region.services)


def format_display_name(name: str) -> str:
    if name == "workflow":
        return "Workflow Manager"
    return name.replace("_", " ")


def format_time_since(then: datetime | None, now: datetime) -> str:
    if then is None:
        return "never"
    minutes = int((now - then).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes == 1:
        return "1 min ago"
    return f"{minutes} mins ago"


class DashboardView:
    """Owns the snapshot and all transient UI state of the dashboard.

    Every trigger (initial/global load, table refresh, per-service refresh)
    fetches the full snapshot from the same endpoint and replaces it
    wholesale. Concurrent fetches are resolved by ``config.race_policy``:

    * ``last_resolved``: responses are applied in the order they arrive.
    * ``latest_issued``: a response older than the last applied one is
      dropped, so a slow request cannot overwrite fresher data.

    Fetch failures never escape; they set :attr:`error` to a single
    generic message and leave the previous snapshot in place.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        fetcher: Fetcher | None = None,
        emitter: EventEmitter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config or DashboardConfig()
        self._fetch: Fetcher = fetcher or partial(
            fetch_snapshot, self._config.endpoint_url, timeout=self._config.timeout
        )
        self._emitter = emitter
        self._clock = clock or (lambda: datetime.now(UTC))
        self._issued_seq = 0
        self._applied_seq = 0

        self.snapshot: HealthSnapshot | None = None
        self.loading = False
        self.table_loading = False
        self.error: str | None = None
        self.selected_provider: str = self._config.default_provider
        self.expanded_service_names: set[str] = set()
        self.service_refresh_states: dict[str, ServiceRefreshState] = {}
        self.last_global_refresh_at: datetime | None = None

    @property
    def race_policy(self) -> str:
        return self._config.race_policy

    # ─── Fetch triggers ───

    async def load_snapshot(self) -> bool:
        """Initial load and global refresh. Returns True when data was applied."""
        self.loading = True
        try:
            outcome = await self._fetch_and_apply("load")
        finally:
            self.loading = False
        if outcome != APPLIED:
            return False
        assert self.snapshot is not None
        now = self._clock()
        self.service_refresh_states = {
            name: ServiceRefreshState(is_refreshing=False, last_refreshed_at=now)
            for name in self.snapshot.hub_service_names()
        }
        self.last_global_refresh_at = now
        return True

    async def refresh_table(self) -> bool:
        self.table_loading = True
        try:
            outcome = await self._fetch_and_apply("table")
        finally:
            self.table_loading = False
        return outcome == APPLIED

    async def refresh_service(self, service_name: str) -> bool:
        """Refresh on behalf of one row. The whole snapshot is still replaced."""
        previous = self.service_refresh_states.get(service_name)
        last = previous.last_refreshed_at if previous and previous.last_refreshed_at else self._clock()
        self.service_refresh_states[service_name] = ServiceRefreshState(
            is_refreshing=True, last_refreshed_at=last
        )
        outcome = FAILED
        try:
            outcome = await self._fetch_and_apply("service", service_name=service_name)
        finally:
            # re-read: a global load may have replaced the map meanwhile
            current = self.service_refresh_states.get(service_name)
            kept = current.last_refreshed_at if current else last
            self.service_refresh_states[service_name] = ServiceRefreshState(
                is_refreshing=False,
                last_refreshed_at=kept if outcome == FAILED else self._clock(),
            )
        return outcome == APPLIED

    async def _fetch_and_apply(self, trigger: str, service_name: str | None = None) -> str:
        self._issued_seq += 1
        seq = self._issued_seq
        await self._emit(REFRESH_STARTED, trigger, seq, service_name)
        try:
            snapshot = await self._fetch()
        except Exception as exc:
            logger.warning("Snapshot fetch #%d (%s) failed: %s", seq, trigger, exc)
            self.error = FETCH_ERROR_MESSAGE
            await self._emit(REFRESH_FAILED, trigger, seq, service_name, error=str(exc))
            return FAILED

        if self.race_policy == "latest_issued" and seq < self._applied_seq:
            logger.info(
                "Discarding stale snapshot #%d (%s); #%d already applied",
                seq,
                trigger,
                self._applied_seq,
            )
            await self._emit(
                REFRESH_DISCARDED, trigger, seq, service_name, superseded_by=self._applied_seq
            )
            return DISCARDED

        self.snapshot = snapshot
        self._applied_seq = seq
        self.error = None
        await self._emit(
            REFRESH_COMPLETED, trigger, seq, service_name, region_count=len(snapshot.status)
        )
        return APPLIED

    async def _emit(
        self,
        event_type: str,
        trigger: str,
        seq: int,
        service_name: str | None,
        **data: object,
    ) -> None:
        if self._emitter is None:
            return
        await self._emitter.emit(
            RefreshEvent(
                event_type=event_type,
                timestamp=self._clock(),
                trigger=trigger,
                sequence=seq,
                service_name=service_name,
                data=dict(data),
            )
        )

    # ─── Local UI state ───

    def select_provider(self, provider: str) -> None:
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown provider: {provider}")
        self.selected_provider = provider

    def toggle_expansion(self, service_name: str) -> set[str]:
        if service_name in self.expanded_service_names:
            self.expanded_service_names.discard(service_name)
        else:
            self.expanded_service_names.add(service_name)
        return self.expanded_service_names

    # ─── Derived data ───

    @property
    def regions(self) -> list[RegionStatus]:
        return self.snapshot.status if self.snapshot else []

    def filter_by_provider(self, provider: str | None = None) -> list[RegionStatus]:
        return filter_by_provider(
            self.regions, self.selected_provider if provider is None else provider
        )

    def all_service_names(self) -> list[str]:
        return all_service_names(self.regions)

    def is_all_healthy(self, provider: str | None = None) -> bool:
        return is_all_healthy(self.filter_by_provider(provider))

    def time_since_last_refresh(self, now: datetime | None = None) -> str:
        return format_time_since(self.last_global_refresh_at, now or self._clock())

    format_display_name = staticmethod(format_display_name)
