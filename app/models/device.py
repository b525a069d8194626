"""Device and Wake-on-LAN data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Device(BaseModel):
    """Saved device that can be woken by name."""

    mac: str
    name: str
    description: str = ""
    created_at: datetime
    updated_at: datetime


class DeviceCreateRequest(BaseModel):
    """Request model for saving a device."""

    name: str = Field(..., min_length=1)
    mac: str = Field(..., min_length=1)
    description: Optional[str] = None


class DeviceUpdateRequest(BaseModel):
    """Request model for updating a saved device."""

    name: Optional[str] = None
    mac: Optional[str] = None
    description: Optional[str] = None


class WakeRequest(BaseModel):
    """Wake-on-LAN request model."""

    mac: str = Field(..., min_length=1)


class WakeResult(BaseModel):
    """
    Outcome of a Wake-on-LAN dispatch.

    ``sent`` only means the datagram left the network stack. The protocol has
    no acknowledgement, so it says nothing about whether the device woke up.
    """

    mac: str
    broadcast_address: str
    port: int
    bytes_sent: int
    sent: bool = True


class WakeResponse(BaseModel):
    """Wake-on-LAN response model."""

    message: str
    result: WakeResult
