"""Shared request and response schema."""
