"""
Device Registry - Holds the lighting devices served by the API.

The registry is seeded once and has fixed membership:
- Device IDs, names and dimming capability never change
- Only a device's brightness value can be updated
- Nothing is persisted; a restart brings back the seed values
"""

import logging
import threading
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Device:
    """A controllable lighting fixture."""
    id: str
    name: str
    dimmable: bool
    value: Any = 0.0  # Brightness in [0.0, 1.0], not clamped

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Device":
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered)


SEED_DEVICES = (
    Device(id="0feed", name="Kitchen", dimmable=False, value=0.0),
    Device(id="aa901", name="Foyer 1", dimmable=True, value=0.0),
    Device(id="aa902", name="Foyer 2", dimmable=True, value=0.8),
)


class DeviceRegistry:
    """
    In-memory registry of lighting devices.

    Devices are kept in a dict keyed by id, with a separate list of ids
    preserving the order they were seeded in. Updates replace the stored
    record under a lock.
    """

    def __init__(self, devices: Iterable[Device] = SEED_DEVICES):
        self._devices: Dict[str, Device] = {}
        self._order: List[str] = []
        self._lock = threading.Lock()

        for device in devices:
            if device.id in self._devices:
                raise ValueError(f"Duplicate device id: {device.id}")
            self._devices[device.id] = device
            self._order.append(device.id)

        logger.debug(f"Registry seeded with {len(self._order)} devices")

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, device_id: str) -> bool:
        return device_id in self._devices

    def list_devices(self) -> List[Device]:
        """Get all devices in seed order."""
        with self._lock:
            return [self._devices[device_id] for device_id in self._order]

    def get_device(self, device_id: str) -> Optional[Device]:
        """Get a device by ID."""
        return self._devices.get(device_id)

    def update_value(self, device_id: str, value: Any) -> Optional[Device]:
        """
        Set a device's brightness value.

        Returns the updated device, or None if no device has this ID.
        The value is stored as given.
        """
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                logger.debug(f"Update for unknown device: {device_id}")
                return None

            updated = replace(device, value=value)
            self._devices[device_id] = updated

        logger.info(f"Device {updated.name} ({device_id}) set to {value!r}")
        return updated
