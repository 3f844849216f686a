"""
Fieldgraph CLI - Command line tools for fieldgraph schemas.
"""

from __future__ import annotations

from .main import main, app

__all__ = ["main", "app"]
