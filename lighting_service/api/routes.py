"""
API routes for the lighting service.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..registry.devices import DeviceRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lighting_service/v1")


# ============ Request/Response Models ============

class DeviceValueUpdate(BaseModel):
    """Request to change a device's brightness."""
    value: Any = Field(..., description="New brightness, normally between 0.0 and 1.0")


class DeviceResponse(BaseModel):
    """A lighting device."""
    id: str
    name: str
    dimmable: bool
    value: Any = None


# ============ Dependencies ============

def get_registry(request: Request) -> DeviceRegistry:
    """Registry owned by the running application."""
    return request.app.state.registry


# ============ Routes ============

@router.get("/devices", response_model=List[DeviceResponse])
async def list_devices(registry: DeviceRegistry = Depends(get_registry)):
    """List all lighting devices in their seeded order."""
    return [device.to_dict() for device in registry.list_devices()]


@router.post("/devices/{device_id}", response_model=DeviceResponse)
async def update_device(
    device_id: str,
    request: DeviceValueUpdate,
    registry: DeviceRegistry = Depends(get_registry),
):
    """Set the brightness value of one device."""
    device = registry.update_value(device_id, request.value)

    if not device:
        raise HTTPException(status_code=404, detail="Device not found")

    return device.to_dict()
