"""Radio adapter and peripheral interfaces."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from lhctl.core.model import AdvertisedProperties, CentralEvent, Characteristic


class Peripheral(Protocol):
    async def properties(self) -> AdvertisedProperties | None:
        """Return the latest advertisement, or None if nothing was received."""

    async def connect(self) -> None:
        ...

    async def disconnect(self) -> None:
        ...

    async def discover_services(self) -> None:
        """Enumerate services so that ``characteristics()`` is populated."""

    def characteristics(self) -> list[Characteristic]:
        ...

    async def read(self, characteristic: Characteristic) -> bytes:
        ...

    async def write(
        self,
        characteristic: Characteristic,
        data: bytes,
        *,
        response: bool = True,
    ) -> None:
        ...


class Adapter(Protocol):
    async def start_scan(self) -> None:
        """Start an unfiltered scan."""

    async def events(self) -> AsyncIterator[CentralEvent]:
        """Return the adapter's discovery event feed."""

    async def peripheral(self, device_id: str) -> Peripheral:
        ...

    async def __aenter__(self) -> Adapter:
        ...

    async def __aexit__(self, *exc_info: object) -> None:
        """Stop scanning and drop any connections still held."""
