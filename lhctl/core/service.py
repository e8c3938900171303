"""Service layer used by CLI and API frontends."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from lhctl.core.config import Config, load_config
from lhctl.core.discovery import discover
from lhctl.core.model import Command, PowerState, StateReport
from lhctl.core.name_filter import NameFilter
from lhctl.transports.base import Adapter

LOGGER = logging.getLogger(__name__)

AdapterFactory = Callable[[str | None], Adapter]


class ScanOutcome(enum.Enum):
    COMPLETED = "completed"
    STREAM_EXHAUSTED = "stream_exhausted"


@dataclass(frozen=True)
class ScanResult:
    outcome: ScanOutcome
    reports: tuple[StateReport, ...]
    missing: tuple[str, ...] = ()


async def run_scan(
    adapter: Adapter,
    command: Command,
    name_filter: NameFilter,
    *,
    echo: Callable[[str], None] = print,
) -> ScanResult:
    """Read, and for non-scan commands set, the power state of matching lighthouses.

    Runs until every requested name has been handled or the discovery feed
    ends. Any adapter or peripheral error propagates and aborts the run.
    """
    reports: list[StateReport] = []
    lighthouses = discover(adapter)
    try:
        while not name_filter.is_completed():
            try:
                lighthouse = await anext(lighthouses)
            except StopAsyncIteration:
                LOGGER.info("Discovery ended before all lighthouses were found")
                return ScanResult(
                    outcome=ScanOutcome.STREAM_EXHAUSTED,
                    reports=tuple(reports),
                    missing=name_filter.pending,
                )

            if not name_filter.is_matched(lighthouse.name):
                continue

            data = await lighthouse.peripheral.read(lighthouse.characteristic)
            if not data:
                LOGGER.debug("Empty status read from %s, waiting for next advertisement", lighthouse.name)
                name_filter.release(lighthouse.name)
                continue
            current = PowerState.decode(data[0])

            target = command.target_state
            written = target is not None and target != current
            report = StateReport(
                name=lighthouse.name,
                current=current,
                target=target,
                written=written,
            )
            echo(report.line())
            if written:
                await lighthouse.peripheral.write(
                    lighthouse.characteristic,
                    bytes([target.encode()]),
                    response=False,
                )
            reports.append(report)
    finally:
        await lighthouses.aclose()

    return ScanResult(outcome=ScanOutcome.COMPLETED, reports=tuple(reports))


class LighthouseService:
    def __init__(
        self,
        *,
        adapter_factory: AdapterFactory | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.adapter_factory = adapter_factory or _default_adapter_factory

    def resolve_names(self, names: Iterable[str]) -> tuple[str, ...]:
        requested = tuple(names)
        return requested or self.config.names

    async def scan(
        self,
        command: Command,
        names: Iterable[str] = (),
        *,
        adapter_name: str | None = None,
        echo: Callable[[str], None] = print,
    ) -> ScanResult:
        name_filter = NameFilter(self.resolve_names(names))
        adapter = self.adapter_factory(adapter_name or self.config.adapter)
        async with adapter:
            result = await run_scan(adapter, command, name_filter, echo=echo)
        if result.missing:
            LOGGER.warning("Lighthouses not found: %s", ", ".join(result.missing))
        return result


def _default_adapter_factory(adapter_name: str | None) -> Adapter:
    from lhctl.transports.bleak_adapter import BleakAdapter

    return BleakAdapter(adapter_name)
