"""Device and Wake-on-LAN API endpoints."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_device_service, get_wol_service, require_auth
from app.models.device import (
    Device,
    DeviceCreateRequest,
    DeviceUpdateRequest,
    WakeRequest,
    WakeResponse,
)
from app.services.device_service import DeviceService
from app.services.wol_service import WakeOnLanService, format_mac

router = APIRouter(prefix="/api/devices", tags=["Devices"], dependencies=[Depends(require_auth)])


def _wake_response(wol_service: WakeOnLanService, mac: str) -> WakeResponse:
    result = wol_service.wake(mac)
    return WakeResponse(
        message=f"Wake-on-LAN packet sent to {format_mac(result.mac)}",
        result=result,
    )


@router.post("/wake", response_model=WakeResponse)
def wake(request: WakeRequest, wol_service: WakeOnLanService = Depends(get_wol_service)):
    """
    Send a Wake-on-LAN magic packet.

    A 200 response means the packet was transmitted, not that the device woke up.
    """
    return _wake_response(wol_service, request.mac)


@router.get("", response_model=list[Device])
def list_devices(device_service: DeviceService = Depends(get_device_service)):
    """List saved devices, most recently updated first."""
    return device_service.list_devices()


@router.post("", response_model=Device, status_code=status.HTTP_201_CREATED)
def create_device(request: DeviceCreateRequest, device_service: DeviceService = Depends(get_device_service)):
    """Save a device for quick wake."""
    return device_service.create_device(request.name, request.mac, request.description)


@router.get("/{mac}", response_model=Device)
def get_device(mac: str, device_service: DeviceService = Depends(get_device_service)):
    return device_service.get_device(mac)


@router.put("/{mac}", response_model=Device)
def update_device(
    mac: str,
    request: DeviceUpdateRequest,
    device_service: DeviceService = Depends(get_device_service),
):
    """Update a saved device. Omitted fields keep their value."""
    return device_service.update_device(
        mac,
        name=request.name,
        new_mac=request.mac,
        description=request.description,
    )


@router.delete("/{mac}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(mac: str, device_service: DeviceService = Depends(get_device_service)):
    device_service.delete_device(mac)


@router.post("/{mac}/wake", response_model=WakeResponse)
def wake_device(
    mac: str,
    device_service: DeviceService = Depends(get_device_service),
    wol_service: WakeOnLanService = Depends(get_wol_service),
):
    """Wake a saved device."""
    device = device_service.get_device(mac)
    return _wake_response(wol_service, device.mac)
