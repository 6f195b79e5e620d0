"""HTTP API for Reviewkeeper.

Exposes the team, user and pull request operations over FastAPI, with
request logging middleware, a uniform error body and health endpoints.
"""

from __future__ import annotations

from reviewkeeper.web.app import create_app

__all__ = ["create_app"]
