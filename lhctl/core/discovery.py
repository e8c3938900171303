"""Discovery of controllable lighthouses from the adapter's event feed."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from lhctl.core.model import CentralEvent, EventKind, Lighthouse
from lhctl.transports.base import Adapter

VENDOR_ID = 0x055D
CONTROL_CHARACTERISTIC_UUID = "00001525-1212-efde-1523-785feabcd124"

_DISCOVERY_EVENTS = frozenset({EventKind.DISCOVERED, EventKind.UPDATED})
LOGGER = logging.getLogger(__name__)


def _device_id(event: CentralEvent) -> str | None:
    if event.kind in _DISCOVERY_EVENTS:
        return event.device_id
    return None


async def discover(adapter: Adapter) -> AsyncGenerator[Lighthouse, None]:
    """Yield lighthouses as their advertisements arrive.

    Each candidate is connected, enumerated and disconnected again before it
    is yielded; only devices advertising the vendor id, a local name and the
    control characteristic make it through. Repeated advertisements of the
    same device are yielded again. Adapter and peripheral errors propagate
    and end the iteration.
    """
    await adapter.start_scan()
    events = await adapter.events()

    async for event in events:
        device_id = _device_id(event)
        if device_id is None:
            continue

        peripheral = await adapter.peripheral(device_id)
        props = await peripheral.properties()
        if props is None:
            LOGGER.debug("Skipping %s: no advertised properties", device_id)
            continue
        if VENDOR_ID not in props.manufacturer_data:
            LOGGER.debug("Skipping %s: no manufacturer data for vendor 0x%04x", device_id, VENDOR_ID)
            continue
        if not props.local_name:
            LOGGER.debug("Skipping %s: no local name", device_id)
            continue

        await peripheral.connect()
        await peripheral.discover_services()
        await peripheral.disconnect()

        characteristic = next(
            (
                ch
                for ch in peripheral.characteristics()
                if ch.uuid.lower() == CONTROL_CHARACTERISTIC_UUID
            ),
            None,
        )
        if characteristic is None:
            LOGGER.debug("Skipping %s (%s): control characteristic not found", props.local_name, device_id)
            continue

        LOGGER.info("Found lighthouse %s (%s)", props.local_name, device_id)
        yield Lighthouse(
            name=props.local_name,
            peripheral=peripheral,
            characteristic=characteristic,
        )
