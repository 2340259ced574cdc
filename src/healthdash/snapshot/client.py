"""Async fetch of the health snapshot."""

from __future__ import annotations

import logging
import time

import httpx

from healthdash.snapshot.models import HealthSnapshot

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The snapshot could not be fetched or parsed.

    The only failure kind the dashboard knows about. The original cause is
    kept on ``__cause__`` for logging.
    """


async def fetch_snapshot(url: str, timeout: float | None = 10.0) -> HealthSnapshot:
    """GET *url* and parse the body as a :class:`HealthSnapshot`."""
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            snapshot = HealthSnapshot.model_validate(resp.json())
    except httpx.TimeoutException as exc:
        raise FetchError(f"Timed out fetching {url}") from exc
    except httpx.HTTPStatusError as exc:
        raise FetchError(f"{url} returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Request to {url} failed: {exc}") from exc
    except ValueError as exc:
        # json decode errors and pydantic ValidationError both land here
        raise FetchError(f"Malformed health payload from {url}: {exc}") from exc

    latency = (time.monotonic() - start) * 1000
    logger.debug(
        "Fetched snapshot from %s in %.1fms (%d regions)", url, latency, len(snapshot.status)
    )
    return snapshot
