"""Tests for the adapter registry."""

from __future__ import annotations

import pytest

from serprelay.adapters.base.exceptions import ConfigurationError
from serprelay.adapters.base.registry import AdapterNotFoundError, AdapterRegistry
from serprelay.adapters.novexity.adapter import NovexityAdapter


class TestAdapterRegistry:
    async def test_initialize_unknown_adapter(self) -> None:
        with pytest.raises(AdapterNotFoundError):
            await AdapterRegistry().initialize_adapter("missing")

    async def test_initialize_unconfigured_adapter_is_not_activated(self) -> None:
        registry = AdapterRegistry()
        registry.register("novexity", NovexityAdapter)

        with pytest.raises(ConfigurationError):
            await registry.initialize_adapter("novexity")

        assert registry.active_adapters == []

    async def test_attach_preserves_priority_order(self, make_adapter) -> None:
        registry = AdapterRegistry()
        registry.attach(make_adapter("novexity"))
        registry.attach(make_adapter("serper"))

        assert [a.name for a in registry.adapters] == ["novexity", "serper"]

    async def test_health_check_all_contains_errors(self, make_adapter) -> None:
        broken = make_adapter("novexity")

        async def explode():
            raise RuntimeError("probe crashed")

        broken.health_check = explode  # type: ignore[method-assign]
        registry = AdapterRegistry()
        registry.attach(broken)
        registry.attach(make_adapter("serper"))

        results = await registry.health_check_all()

        assert results["novexity"].status == "unhealthy"
        assert results["novexity"].message == "probe crashed"
        assert results["serper"].status == "healthy"

    async def test_shutdown_all(self, make_adapter) -> None:
        adapter = make_adapter("novexity")
        registry = AdapterRegistry()
        registry.attach(adapter)

        await registry.shutdown_all()

        assert adapter.shut_down is True
        assert registry.active_adapters == []
