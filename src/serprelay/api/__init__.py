"""HTTP API — FastAPI application exposing the SERP resolution layer."""
