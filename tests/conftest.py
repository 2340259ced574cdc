"""Shared fixtures for healthdash tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from healthdash.config.models import DashboardConfig
from healthdash.snapshot.models import HealthSnapshot


SAMPLE_CONFIG: Dict[str, Any] = {
    "dashboard": {"name": "Service Health Dashboard", "version": "0.1.0"},
    "endpoint_url": "http://health.test/services-health",
    "timeout": 5.0,
    "default_provider": "AWS",
    "race_policy": "last_resolved",
    "refresh_interval": 15.0,
    "event_log_size": 50,
}

SAMPLE_PAYLOAD: Dict[str, Any] = {
    "hubs": {
        "hub-1": {"services": ["auth", "workflow"]},
        "hub-2": {
            "services": [
                {"service_name": "data_pipeline", "status": "healthy", "version": "2.0.0", "replicas": 2}
            ]
        },
    },
    "status": [
        {
            "region": "us-east-1",
            "csp": "aws",
            "cluster_name": "Prod",
            "services": [
                {"service_name": "auth", "status": "healthy", "version": "1.2.0", "replicas": 3},
                {"service_name": "workflow", "status": "healthy", "version": "4.1.0", "replicas": 2},
            ],
        },
        {
            "region": "dcc-1",
            "csp": "AWS",
            "cluster_name": "DCC-Production",
            "services": [
                {"service_name": "workflow", "status": "unhealthy", "version": "4.0.9", "replicas": 0},
            ],
        },
        {
            "region": "westeurope",
            "csp": "Azure",
            "cluster_name": "Prod-EU",
            "services": [
                {"service_name": "data_pipeline", "status": "healthy", "version": "2.0.0", "replicas": 2},
                {"service_name": "auth", "status": "degraded", "version": "1.1.0", "replicas": 1},
            ],
        },
    ],
}


def make_payload(**overrides: Any) -> Dict[str, Any]:
    """Deep copy of the sample payload with top-level keys replaced."""
    payload = copy.deepcopy(SAMPLE_PAYLOAD)
    payload.update(overrides)
    return payload


@pytest.fixture()
def sample_config() -> DashboardConfig:
    """Return a parsed DashboardConfig from sample data."""
    return DashboardConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def sample_payload() -> Dict[str, Any]:
    return make_payload()


@pytest.fixture()
def sample_snapshot() -> HealthSnapshot:
    return HealthSnapshot.model_validate(make_payload())


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .healthdash.yaml and return the path."""
    path = tmp_path / ".healthdash.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path


@pytest.fixture()
def payload_factory():
    """Build payload variants: ``payload_factory(status=[...])``."""
    return make_payload
