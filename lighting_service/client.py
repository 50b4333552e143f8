"""
HTTP client for a running lighting service.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp

from .registry.devices import Device

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:3000"
API_PREFIX = "/lighting_service/v1"


class DeviceNotFoundError(LookupError):
    """The service has no device with the requested ID."""

    def __init__(self, device_id: str):
        super().__init__(f"Device not found: {device_id}")
        self.device_id = device_id


class LightingClient:
    """
    Async client for the lighting service API.

    Usage:
        async with LightingClient("http://localhost:3000") as client:
            devices = await client.list_devices()
            await client.set_value("aa901", 0.5)
    """

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "LightingClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    def _device_url(self, device_id: str) -> str:
        return self._url(f"/devices/{quote(device_id, safe='')}")

    async def list_devices(self) -> List[Device]:
        """Fetch every device from the service."""
        session = await self._get_session()
        async with session.get(self._url("/devices")) as resp:
            resp.raise_for_status()
            data = await resp.json()
        return [Device.from_dict(item) for item in data]

    async def set_value(self, device_id: str, value: Any) -> Device:
        """Update one device's brightness and return the new record."""
        session = await self._get_session()
        async with session.post(self._device_url(device_id), json={"value": value}) as resp:
            if resp.status == 404:
                raise DeviceNotFoundError(device_id)
            resp.raise_for_status()
            data = await resp.json()
        logger.debug(f"Set {device_id} to {value!r}")
        return Device.from_dict(data)
