"""
Lighting Service - example device backend for tutorials

Serves an in-memory list of lighting devices over HTTP, with a simulated
network delay and permissive cross-origin headers.

Example:
    >>> from lighting_service.api import create_app
    >>> app = create_app()
"""

__version__ = "1.0.0"

from .config import Config, get_config
from .registry.devices import Device, DeviceRegistry

__all__ = [
    "__version__",
    "Config",
    "get_config",
    "Device",
    "DeviceRegistry",
]
