"""Periodic ingestion of upstream market records with a small query API."""

from __future__ import annotations

__version__ = "0.1.0"
