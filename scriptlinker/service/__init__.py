"""HTTP service mode for scriptlinker."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
