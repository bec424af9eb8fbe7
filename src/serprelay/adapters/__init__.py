"""Search adapter layer — Pluggable connectors for SERP providers.

Built-in adapters, in default fallback priority:
  - novexity: Self-hosted Novexity (SerpAPI-compatible scraper)
  - searxng: Self-hosted SearXNG meta-search instance
  - searxng-public: Shuffled list of public SearXNG mirrors
  - serper: Serper.dev paid Google SERP API

Implement ``SearchAdapter`` to connect your own provider.
"""
