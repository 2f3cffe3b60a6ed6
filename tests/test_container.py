"""Tests for container wiring."""

import asyncio

from macro_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.progress_service.stats_service is container.stats_service
    assert container.countable_units
    asyncio.run(container.close_resources())
