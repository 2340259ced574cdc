"""Pydantic models for healthdash configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_ENDPOINT_URL = "https://health.vue.ai/services-health"

ProviderName = Literal["AWS", "DCC", "Azure"]
RacePolicy = Literal["last_resolved", "latest_issued"]


class DashboardIdentity(BaseModel):
    """Display metadata for the dashboard."""

    name: str = "Service Health Dashboard"
    version: str = "0.1.0"


class DashboardConfig(BaseModel):
    """Root configuration model for .healthdash.yaml."""

    dashboard: DashboardIdentity = Field(default_factory=DashboardIdentity)
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    timeout: float | None = Field(default=10.0, gt=0)  # None = wait forever
    default_provider: ProviderName = "AWS"
    race_policy: RacePolicy = "last_resolved"
    refresh_interval: float = Field(default=30.0, gt=0)
    event_log_size: int = Field(default=100, ge=1)
