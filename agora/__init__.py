"""Agora: JSON-file backed REST API for blog posts and research collaboration."""

__version__ = "1.0.0"
