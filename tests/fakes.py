"""In-memory adapter and peripherals for driving discovery and the scan loop."""

from __future__ import annotations

from lhctl.core.discovery import CONTROL_CHARACTERISTIC_UUID, VENDOR_ID
from lhctl.core.errors import ResolutionError
from lhctl.core.model import AdvertisedProperties, CentralEvent, Characteristic, EventKind


class FakePeripheral:
    def __init__(
        self,
        name: str | None,
        *,
        status: bytes = b"\x02",
        vendor_id: int = VENDOR_ID,
        characteristic_uuid: str = CONTROL_CHARACTERISTIC_UUID,
        advertises: bool = True,
        connect_error: Exception | None = None,
        read_error: Exception | None = None,
        write_error: Exception | None = None,
    ) -> None:
        self.name = name
        self.status = status
        self.vendor_id = vendor_id
        self.characteristic_uuid = characteristic_uuid
        self.advertises = advertises
        self.connect_error = connect_error
        self.read_error = read_error
        self.write_error = write_error
        self.connected = False
        self.calls: list[str] = []
        self.writes: list[tuple[bytes, bool]] = []
        self._characteristics: list[Characteristic] = []

    async def properties(self) -> AdvertisedProperties | None:
        self.calls.append("properties")
        if not self.advertises:
            return None
        return AdvertisedProperties(
            local_name=self.name,
            manufacturer_data={self.vendor_id: b"\x00"},
        )

    async def connect(self) -> None:
        self.calls.append("connect")
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def disconnect(self) -> None:
        self.calls.append("disconnect")
        self.connected = False

    async def discover_services(self) -> None:
        self.calls.append("discover_services")
        self._characteristics = [
            Characteristic(uuid="00002a00-0000-1000-8000-00805f9b34fb", handle=3),
            Characteristic(uuid=self.characteristic_uuid, handle=12),
        ]

    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics)

    async def read(self, characteristic: Characteristic) -> bytes:
        self.calls.append("read")
        if self.read_error is not None:
            raise self.read_error
        return self.status

    async def write(self, characteristic: Characteristic, data: bytes, *, response: bool = True) -> None:
        self.calls.append("write")
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((data, response))


class FakeAdapter:
    def __init__(self, peripherals: dict[str, FakePeripheral], events: list[CentralEvent]) -> None:
        self.peripherals = peripherals
        self.feed = list(events)
        self.scanning = False
        self.closed = False
        self.pulled = 0

    async def start_scan(self) -> None:
        self.scanning = True

    async def events(self):
        return self._iter_events()

    async def _iter_events(self):
        for event in self.feed:
            self.pulled += 1
            yield event

    async def peripheral(self, device_id: str) -> FakePeripheral:
        try:
            return self.peripherals[device_id]
        except KeyError:
            raise ResolutionError(f"Unknown device {device_id}") from None

    async def __aenter__(self) -> FakeAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True


def discovered(device_id: str) -> CentralEvent:
    return CentralEvent(kind=EventKind.DISCOVERED, device_id=device_id)


def updated(device_id: str) -> CentralEvent:
    return CentralEvent(kind=EventKind.UPDATED, device_id=device_id)
