"""Entry points for scripts that want lighthouse power control without the CLI.

Everything listed in ``__all__`` keeps its name and signature across minor
releases. `Client` runs the same scan loop as ``lhctl`` and returns the
reports instead of printing them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from lhctl.core.config import Config
from lhctl.core.discovery import CONTROL_CHARACTERISTIC_UUID, VENDOR_ID, discover
from lhctl.core.errors import (
    AdapterError,
    ConfigError,
    DeviceConnectionError,
    EnumerationError,
    LhctlError,
    ResolutionError,
    TransportError,
)
from lhctl.core.model import (
    AdvertisedProperties,
    CentralEvent,
    Characteristic,
    Command,
    EventKind,
    Lighthouse,
    PowerKind,
    PowerState,
    StateReport,
)
from lhctl.core.name_filter import NameFilter
from lhctl.core.service import AdapterFactory, LighthouseService, ScanOutcome, ScanResult, run_scan
from lhctl.transports.base import Adapter, Peripheral

__all__ = [
    "LhctlError",
    "AdapterError",
    "ConfigError",
    "DeviceConnectionError",
    "EnumerationError",
    "ResolutionError",
    "TransportError",
    "AdvertisedProperties",
    "CentralEvent",
    "Characteristic",
    "Command",
    "EventKind",
    "Lighthouse",
    "PowerKind",
    "PowerState",
    "StateReport",
    "NameFilter",
    "ScanOutcome",
    "ScanResult",
    "Adapter",
    "Peripheral",
    "CONTROL_CHARACTERISTIC_UUID",
    "VENDOR_ID",
    "discover",
    "run_scan",
    "Client",
]


class Client:
    """Reads and sets lighthouse power states.

    Pass `adapter_factory` to use a radio backend other than bleak.
    """

    def __init__(
        self,
        *,
        adapter_factory: AdapterFactory | None = None,
        config: Config | None = None,
    ) -> None:
        self._service = LighthouseService(adapter_factory=adapter_factory, config=config)

    @property
    def config(self) -> Config:
        return self._service.config

    async def scan(
        self,
        command: Command | str,
        names: Iterable[str] = (),
        *,
        adapter_name: str | None = None,
        echo: Callable[[str], None] | None = None,
    ) -> ScanResult:
        return await self._service.scan(
            Command(command),
            names,
            adapter_name=adapter_name,
            echo=echo or (lambda _line: None),
        )

    async def states(
        self,
        names: Iterable[str] = (),
        *,
        adapter_name: str | None = None,
    ) -> dict[str, PowerState]:
        """Read current states without writing. Without names this only returns once discovery ends."""
        result = await self.scan(Command.SCAN, names, adapter_name=adapter_name)
        return {report.name: report.current for report in result.reports}
