"""Serper.dev adapter."""
