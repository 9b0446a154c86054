"""
API Interface - FastAPI REST surface over one search session.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
