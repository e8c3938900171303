"""BLE adapter implementation on top of bleak."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from lhctl.core.errors import (
    AdapterError,
    DeviceConnectionError,
    EnumerationError,
    ResolutionError,
    TransportError,
)
from lhctl.core.model import AdvertisedProperties, CentralEvent, Characteristic, EventKind

_RADIO_ERRORS = (BleakError, asyncio.TimeoutError, OSError)
LOGGER = logging.getLogger(__name__)


class BleakPeripheral:
    def __init__(self, device: BLEDevice, advertisement: AdvertisementData | None = None) -> None:
        self.device = device
        self.advertisement = advertisement
        self._client = BleakClient(device)
        self._characteristics: list[Characteristic] = []

    @property
    def address(self) -> str:
        return self.device.address

    @property
    def is_connected(self) -> bool:
        return self._client.is_connected

    async def properties(self) -> AdvertisedProperties | None:
        if self.advertisement is None:
            return None
        return AdvertisedProperties(
            local_name=self.advertisement.local_name or self.device.name,
            manufacturer_data=dict(self.advertisement.manufacturer_data),
        )

    async def connect(self) -> None:
        if self._client.is_connected:
            return
        try:
            await self._client.connect()
        except _RADIO_ERRORS as exc:
            raise DeviceConnectionError(f"BLE connect failed for {self.address}: {exc}") from exc

    async def disconnect(self) -> None:
        try:
            await self._client.disconnect()
        except _RADIO_ERRORS as exc:
            raise DeviceConnectionError(f"BLE disconnect failed for {self.address}: {exc}") from exc

    async def discover_services(self) -> None:
        # bleak resolves the GATT table while connecting
        try:
            services = self._client.services
        except BleakError as exc:
            raise EnumerationError(f"Service discovery failed for {self.address}: {exc}") from exc
        self._characteristics = [
            Characteristic(uuid=ch.uuid.lower(), handle=ch.handle)
            for service in services
            for ch in service.characteristics
        ]

    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics)

    async def _ensure_connected(self) -> None:
        if not self._client.is_connected:
            await self.connect()

    def _specifier(self, characteristic: Characteristic) -> int | str:
        return characteristic.handle if characteristic.handle is not None else characteristic.uuid

    async def read(self, characteristic: Characteristic) -> bytes:
        await self._ensure_connected()
        try:
            data = await self._client.read_gatt_char(self._specifier(characteristic))
        except _RADIO_ERRORS as exc:
            raise TransportError(
                f"Reading {characteristic.uuid} from {self.address} failed: {exc}"
            ) from exc
        return bytes(data)

    async def write(
        self,
        characteristic: Characteristic,
        data: bytes,
        *,
        response: bool = True,
    ) -> None:
        await self._ensure_connected()
        try:
            await self._client.write_gatt_char(
                self._specifier(characteristic),
                data,
                response=response,
            )
        except _RADIO_ERRORS as exc:
            raise TransportError(
                f"Writing {characteristic.uuid} to {self.address} failed: {exc}"
            ) from exc


class BleakAdapter:
    """Scans with a single BleakScanner and exposes sightings as an event feed.

    The first advertisement seen from an address is reported as
    ``DISCOVERED``, every later one as ``UPDATED``. Leaving the context stops
    the scanner, ends the event feed and disconnects peripherals that are
    still connected. At most one event per address waits in the feed; newer
    advertisements only refresh the stored advertisement data.
    """

    def __init__(self, adapter_name: str | None = None) -> None:
        self.adapter_name = adapter_name
        self._queue: asyncio.Queue[CentralEvent | None] = asyncio.Queue()
        self._peripherals: dict[str, BleakPeripheral] = {}
        self._queued: set[str] = set()
        self._scanner: BleakScanner | None = None

    def _scanner_kwargs(self) -> dict[str, Any]:
        if self.adapter_name:
            return {"adapter": self.adapter_name}
        return {}

    def _on_advertisement(self, device: BLEDevice, advertisement: AdvertisementData) -> None:
        peripheral = self._peripherals.get(device.address)
        if peripheral is None:
            self._peripherals[device.address] = BleakPeripheral(device, advertisement)
            kind = EventKind.DISCOVERED
        else:
            peripheral.device = device
            peripheral.advertisement = advertisement
            kind = EventKind.UPDATED
        if device.address in self._queued:
            return
        self._queued.add(device.address)
        self._queue.put_nowait(CentralEvent(kind=kind, device_id=device.address))

    async def start_scan(self) -> None:
        if self._scanner is not None:
            return
        try:
            scanner = BleakScanner(
                detection_callback=self._on_advertisement,
                **self._scanner_kwargs(),
            )
            await scanner.start()
        except _RADIO_ERRORS as exc:
            where = f" on {self.adapter_name}" if self.adapter_name else ""
            raise AdapterError(f"Could not start BLE scan{where}: {exc}") from exc
        self._scanner = scanner
        LOGGER.info("Scanning for lighthouses%s", f" on {self.adapter_name}" if self.adapter_name else "")

    async def events(self) -> AsyncIterator[CentralEvent]:
        if self._scanner is None:
            raise AdapterError("Event feed requested before scanning was started")
        return self._iter_events()

    async def _iter_events(self) -> AsyncIterator[CentralEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            self._queued.discard(event.device_id)
            yield event

    async def peripheral(self, device_id: str) -> BleakPeripheral:
        peripheral = self._peripherals.get(device_id)
        if peripheral is None:
            raise ResolutionError(f"Unknown device {device_id}")
        return peripheral

    async def stop(self) -> None:
        if self._scanner is not None:
            scanner, self._scanner = self._scanner, None
            try:
                await scanner.stop()
            except _RADIO_ERRORS as exc:
                LOGGER.warning("Stopping BLE scan failed: %s", exc)
            self._queue.put_nowait(None)

        for peripheral in self._peripherals.values():
            if peripheral.is_connected:
                try:
                    await peripheral.disconnect()
                except DeviceConnectionError as exc:
                    LOGGER.warning("%s", exc)

    async def __aenter__(self) -> BleakAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
