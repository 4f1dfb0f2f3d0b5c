"""Translate localization XML bundles through a remote translation service."""

__version__ = "1.0.0"
