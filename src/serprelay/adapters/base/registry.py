"""Adapter Registry — Ordered set of active SERP adapters.

Registration order is fallback priority: the engine walks
``registry.adapters`` front to back and stops at the first provider that
returns results.
"""

from __future__ import annotations

import logging
from typing import Any

from serprelay.adapters.base.adapter import AdapterHealth, SearchAdapter

logger = logging.getLogger(__name__)


class AdapterNotFoundError(Exception):
    """Raised when a requested adapter is not registered."""


class AdapterRegistry:
    """Registry for managing search adapter instances.

    The registry maintains both adapter class registrations and
    initialized adapter instances. It supports:
      - Registering adapter classes by name
      - Creating and initializing adapter instances from config
      - Attaching ready-made instances (tests, embedding)
      - Iterating active adapters in priority order
      - Health checking all active adapters

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register("novexity", NovexityAdapter)
        >>> await registry.initialize_adapter("novexity", base_url="http://novexity:8000")
        >>> [a.name for a in registry.adapters]
        ['novexity']
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchAdapter]] = {}
        self._instances: dict[str, SearchAdapter] = {}

    def register(self, name: str, adapter_class: type[SearchAdapter]) -> None:
        """Register an adapter class.

        Args:
            name: Unique name for this adapter type.
            adapter_class: The adapter class to register.
        """
        if name in self._classes:
            logger.warning("Overwriting existing adapter registration: %s", name)
        self._classes[name] = adapter_class
        logger.debug("Registered adapter class: %s", name)

    async def initialize_adapter(self, name: str, **kwargs: Any) -> SearchAdapter:
        """Create and initialize an adapter instance.

        The instance is appended to the end of the priority order.

        Args:
            name: The registered adapter name.
            **kwargs: Configuration parameters passed to the adapter constructor.

        Returns:
            The initialized adapter instance.

        Raises:
            AdapterNotFoundError: If no adapter is registered under this name.
            ConfigurationError: If the adapter lacks required configuration.
        """
        if name not in self._classes:
            raise AdapterNotFoundError(
                f"No adapter registered with name '{name}'. "
                f"Available adapters: {list(self._classes.keys())}"
            )

        adapter = self._classes[name](**kwargs)
        await adapter.initialize()
        self._instances[name] = adapter
        logger.info("Initialized adapter: %s", name)
        return adapter

    def attach(self, adapter: SearchAdapter) -> None:
        """Add an already-initialized adapter at the end of the priority order."""
        if adapter.name in self._instances:
            logger.warning("Replacing active adapter: %s", adapter.name)
            del self._instances[adapter.name]
        self._instances[adapter.name] = adapter

    @property
    def adapters(self) -> list[SearchAdapter]:
        """Active adapters in fallback priority order."""
        return list(self._instances.values())

    async def health_check_all(self) -> dict[str, AdapterHealth]:
        """Run health checks on all initialized adapters.

        Returns:
            Dictionary mapping adapter names to their health status.
        """
        results: dict[str, AdapterHealth] = {}
        for name, adapter in self._instances.items():
            try:
                results[name] = await adapter.health_check()
            except Exception as e:
                results[name] = AdapterHealth(
                    status="unhealthy",
                    message=str(e),
                )
        return results

    async def shutdown_all(self) -> None:
        """Gracefully shut down all initialized adapters."""
        for name, adapter in self._instances.items():
            try:
                await adapter.shutdown()
                logger.info("Shut down adapter: %s", name)
            except Exception:
                logger.warning("Error shutting down adapter: %s", name, exc_info=True)
        self._instances.clear()

    @property
    def active_adapters(self) -> list[str]:
        """List all initialized adapter names, in priority order."""
        return list(self._instances.keys())
