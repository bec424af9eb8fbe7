"""SearXNG adapters (self-hosted instance and public mirrors)."""
