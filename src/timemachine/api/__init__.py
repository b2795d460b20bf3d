"""HTTP front end."""

from .server import GenerateHistoryRequest, create_app

__all__ = ["GenerateHistoryRequest", "create_app"]
