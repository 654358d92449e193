"""
Device registry service.

Devices are owned by a farmer. They are never deleted; decommissioning is a
terminal status so historical telemetry keeps a valid parent row.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Device
from agrilink.core.database.repositories import DeviceRepository, Page
from agrilink.core.exceptions import BadRequestException, ForbiddenException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import DeviceStatus
from agrilink.core.models.io.iot import DeviceCreate

logger = get_logger(__name__)


class DeviceService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.devices = DeviceRepository(session)

    async def register_device(self, farmer_id: uuid.UUID, request: DeviceCreate) -> Device:
        if request.serial_number and await self.devices.get_by_serial_number(request.serial_number):
            raise BadRequestException("Device with serial number already registered")

        device = Device(
            farmer_id=farmer_id,
            farm_id=request.farm_id,
            device_name=request.device_name,
            device_type=request.device_type,
            serial_number=request.serial_number,
            firmware_version=request.firmware_version,
            status=DeviceStatus.ACTIVE,
        )
        device = await self.devices.create(device)
        await self.session.commit()
        logger.info(
            f"Registered device {device.id} ({device.device_type.value}) for farmer {farmer_id}",
            extra={"device_id": str(device.id), "farmer_id": str(farmer_id)},
        )
        return device

    async def get_device(self, device_id: uuid.UUID) -> Device:
        device = await self.devices.get_by_id(device_id)
        if device is None:
            raise ResourceNotFoundException("Device", "id", device_id)
        return device

    async def get_device_for_owner(self, device_id: uuid.UUID, farmer_id: uuid.UUID) -> Device:
        device = await self.get_device(device_id)
        if device.farmer_id != farmer_id:
            raise ForbiddenException("You do not have access to this device")
        return device

    async def get_devices_by_farmer(self, farmer_id: uuid.UUID) -> List[Device]:
        return await self.devices.find_by_farmer(farmer_id)

    async def get_devices_by_farmer_paged(self, farmer_id: uuid.UUID, page: int, size: int) -> Page[Device]:
        return await self.devices.find_by_farmer_paged(farmer_id, page, size)

    async def update_device_status(self, device_id: uuid.UUID, status: DeviceStatus, farmer_id: uuid.UUID) -> Device:
        device = await self.get_device_for_owner(device_id, farmer_id)
        previous = device.status
        device.status = status
        await self.devices.update(device)
        await self.session.commit()
        logger.info(
            f"Device {device_id} status changed {previous.value} -> {status.value}",
            extra={"device_id": str(device_id), "status": status.value},
        )
        return device

    async def decommission_device(self, device_id: uuid.UUID, farmer_id: uuid.UUID) -> Device:
        return await self.update_device_status(device_id, DeviceStatus.DECOMMISSIONED, farmer_id)

    async def update_last_seen(self, device_id: uuid.UUID, commit: bool = True) -> Device:
        """Stamp ``last_seen_at``. Pass ``commit=False`` to join the caller's transaction."""
        device = await self.get_device(device_id)
        device.last_seen_at = utc_now()
        await self.devices.update(device)
        if commit:
            await self.session.commit()
        return device
