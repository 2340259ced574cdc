"""Pydantic schema for the services-health payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


class ServiceStatus(BaseModel):
    """Status of one service in one region."""

    service_name: str
    status: str = "unknown"  # anything but healthy/unhealthy renders as unknown
    version: str = ""
    replicas: int = Field(default=0, ge=0)

    @property
    def is_healthy(self) -> bool:
        return self.status == HEALTHY

    @property
    def status_label(self) -> str:
        if self.status in (HEALTHY, UNHEALTHY):
            return self.status
        return "unknown"


class HubService(BaseModel):
    """A service listed under a hub.

    Hubs list services either by bare name or as full status objects;
    both forms land here.
    """

    service_name: str
    status: str | None = None
    version: str | None = None
    replicas: int | None = None


class Hub(BaseModel):
    services: list[HubService] = Field(default_factory=list)

    @field_validator("services", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"service_name": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def service_names(self) -> list[str]:
        return [s.service_name for s in self.services]


class RegionStatus(BaseModel):
    """Service statuses reported by one deployment region."""

    region: str
    csp: str
    cluster_name: str = ""
    services: list[ServiceStatus] = Field(default_factory=list)

    def find_service(self, service_name: str) -> ServiceStatus | None:
        for service in self.services:
            if service.service_name == service_name:
                return service
        return None


class HealthSnapshot(BaseModel):
    """The full health payload as of one fetch."""

    hubs: dict[str, Hub] = Field(default_factory=dict)
    status: list[RegionStatus] = Field(default_factory=list)

    def hub_service_names(self) -> list[str]:
        """Service names listed under any hub, first-seen order, deduplicated."""
        seen: dict[str, None] = {}
        for hub in self.hubs.values():
            for name in hub.service_names:
                seen.setdefault(name, None)
        return list(seen)
