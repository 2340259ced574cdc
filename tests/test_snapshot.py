"""Tests for the payload schema and the snapshot fetch client."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from pydantic import ValidationError

from healthdash.snapshot.client import FetchError, fetch_snapshot
from healthdash.snapshot.models import HealthSnapshot, Hub, RegionStatus, ServiceStatus

URL = "http://health.test/services-health"


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", URL), **kwargs)


def _mock_client(mock_cls, response=None, side_effect=None) -> AsyncMock:
    mock_client = AsyncMock()
    if side_effect is not None:
        mock_client.get.side_effect = side_effect
    else:
        mock_client.get.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_cls.return_value = mock_client
    return mock_client


# ─── Schema tests ───


class TestServiceStatus:
    def test_healthy(self):
        s = ServiceStatus(service_name="auth", status="healthy", version="1.0", replicas=2)
        assert s.is_healthy
        assert s.status_label == "healthy"

    def test_unknown_status_label(self):
        s = ServiceStatus(service_name="auth", status="degraded")
        assert not s.is_healthy
        assert s.status_label == "unknown"

    def test_missing_status_is_unknown(self):
        assert ServiceStatus(service_name="auth").status_label == "unknown"

    def test_negative_replicas_rejected(self):
        with pytest.raises(ValidationError):
            ServiceStatus(service_name="auth", replicas=-1)


class TestHub:
    def test_plain_names(self):
        hub = Hub.model_validate({"services": ["auth", "workflow"]})
        assert hub.service_names == ["auth", "workflow"]

    def test_service_objects(self):
        hub = Hub.model_validate(
            {"services": [{"service_name": "auth", "status": "healthy", "version": "1", "replicas": 1}]}
        )
        assert hub.service_names == ["auth"]
        assert hub.services[0].status == "healthy"

    def test_mixed_forms(self):
        hub = Hub.model_validate({"services": ["auth", {"service_name": "search"}]})
        assert hub.service_names == ["auth", "search"]


class TestHealthSnapshot:
    def test_parses_sample(self, sample_snapshot: HealthSnapshot):
        assert len(sample_snapshot.status) == 3
        assert sample_snapshot.status[0].services[0].version == "1.2.0"

    def test_hub_service_names_deduplicated(self):
        snap = HealthSnapshot.model_validate(
            {"hubs": {"a": {"services": ["auth", "search"]}, "b": {"services": ["search", "billing"]}}}
        )
        assert snap.hub_service_names() == ["auth", "search", "billing"]

    def test_empty_payload(self):
        snap = HealthSnapshot.model_validate({})
        assert snap.hubs == {}
        assert snap.status == []

    def test_find_service(self):
        region = RegionStatus(
            region="r",
            csp="aws",
            services=[ServiceStatus(service_name="auth", status="healthy")],
        )
        assert region.find_service("auth") is not None
        assert region.find_service("billing") is None


# ─── fetch_snapshot tests ───


class TestFetchSnapshot:
    @pytest.mark.asyncio
    async def test_success(self, sample_payload):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            client = _mock_client(mock_cls, _response(200, json=sample_payload))
            snap = await fetch_snapshot(URL, timeout=3.0)
        assert isinstance(snap, HealthSnapshot)
        assert [r.region for r in snap.status] == ["us-east-1", "dcc-1", "westeurope"]
        client.get.assert_awaited_once_with(URL)
        mock_cls.assert_called_once_with(timeout=3.0)

    @pytest.mark.asyncio
    async def test_no_timeout(self, sample_payload):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, _response(200, json=sample_payload))
            await fetch_snapshot(URL, timeout=None)
        mock_cls.assert_called_once_with(timeout=None)

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, _response(503, json={"detail": "down"}))
            with pytest.raises(FetchError, match="HTTP 503"):
                await fetch_snapshot(URL)

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, _response(200, text="<html>oops</html>"))
            with pytest.raises(FetchError, match="Malformed"):
                await fetch_snapshot(URL)

    @pytest.mark.asyncio
    async def test_schema_mismatch(self):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, _response(200, json={"status": [{"region": "r"}]}))
            with pytest.raises(FetchError, match="Malformed"):
                await fetch_snapshot(URL)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, side_effect=httpx.ConnectError("Connection refused"))
            with pytest.raises(FetchError, match="Connection refused") as info:
                await fetch_snapshot(URL)
        assert isinstance(info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        with patch("healthdash.snapshot.client.httpx.AsyncClient") as mock_cls:
            _mock_client(mock_cls, side_effect=httpx.ReadTimeout("slow"))
            with pytest.raises(FetchError, match="Timed out"):
                await fetch_snapshot(URL)
