"""HTTP surface (FastAPI)."""

from stockroom.api.server import create_app

__all__ = ["create_app"]
