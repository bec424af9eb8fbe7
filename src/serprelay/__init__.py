"""SerpRelay — Multi-provider SERP resolution with caching and graceful fallback."""

__version__ = "0.1.0"
