"""Novexity adapter (self-hosted, SerpAPI-compatible)."""
