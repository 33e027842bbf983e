"""Fluent palette, theming, table models, settings, logging, scaffolding, HTTP and AES helpers."""

__version__ = "1.0.0"