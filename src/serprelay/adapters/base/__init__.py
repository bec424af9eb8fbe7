"""Base adapter interface — Abstract classes for SERP provider connectors."""

from serprelay.adapters.base.adapter import AdapterHealth, SearchAdapter
from serprelay.adapters.base.http import HttpSearchAdapter
from serprelay.adapters.base.registry import AdapterRegistry

__all__ = ["AdapterHealth", "AdapterRegistry", "HttpSearchAdapter", "SearchAdapter"]
