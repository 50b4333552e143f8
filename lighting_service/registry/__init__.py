"""Device registry module."""
from .devices import (
    Device,
    DeviceRegistry,
    SEED_DEVICES,
)

__all__ = [
    "Device",
    "DeviceRegistry",
    "SEED_DEVICES",
]
