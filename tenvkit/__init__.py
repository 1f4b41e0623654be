"""Helpers for managing versions of infrastructure tools: settings, downloads, release listing, checks, archives and process proxying."""

__version__ = "0.1.0"