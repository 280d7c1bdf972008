"""Web service for repeated analyses sharing one inventory cache."""

from __future__ import annotations

from dep_analyze.web.app import create_app

__all__ = ["create_app"]
