"""Core resolution logic — normalization, mock generation, and the fallback engine."""
