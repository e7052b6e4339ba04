"""HTTP API for publishing and viewing broadcasts."""

from .app import create_app, get_service

__all__ = ["create_app", "get_service"]
