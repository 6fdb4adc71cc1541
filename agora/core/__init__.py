"""
Core utilities shared across the Agora API.

This package hosts:
- configuration helpers (env vars, data file path, preset selection)
- the error taxonomy converted to JSON envelopes by the app
- logging setup

Routers and services depend on these primitives instead of reading the
environment or building HTTP responses for errors themselves.
"""
