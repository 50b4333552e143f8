"""
API server for the lighting service.

Provides REST endpoints for:
- Listing lighting devices
- Updating a device's brightness value
"""

from .server import create_app, run_server, ServerBindError
from .routes import router

__all__ = [
    "create_app",
    "run_server",
    "ServerBindError",
    "router",
]
