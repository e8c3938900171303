"""Core data models used across discovery, service, and CLI."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lhctl.transports.base import Peripheral


class PowerKind(enum.Enum):
    SLEEP = "SLEEP"
    BOOTING = "BOOTING"
    STANDBY = "STANDBY"
    ON = "ON"
    UNKNOWN = "UNKNOWN"


_DECODE: dict[int, PowerKind] = {
    0x00: PowerKind.SLEEP,
    0x01: PowerKind.BOOTING,
    0x08: PowerKind.BOOTING,
    0x09: PowerKind.BOOTING,
    0x02: PowerKind.STANDBY,
    0x0B: PowerKind.ON,
}

# ON shares the boot command byte with BOOTING.
_ENCODE: dict[PowerKind, int] = {
    PowerKind.SLEEP: 0x00,
    PowerKind.BOOTING: 0x01,
    PowerKind.STANDBY: 0x02,
    PowerKind.ON: 0x01,
}


@dataclass(frozen=True)
class PowerState:
    """Power state of a lighthouse as carried by the one-byte status register.

    Every byte decodes to exactly one state. Unrecognised bytes become
    ``UNKNOWN`` and keep the original value in ``raw`` so they encode back
    unchanged.
    """

    kind: PowerKind
    raw: int | None = None

    def __post_init__(self) -> None:
        if self.kind is PowerKind.UNKNOWN:
            if self.raw is None or not 0 <= self.raw <= 0xFF:
                raise ValueError(f"UNKNOWN power state needs a raw byte, got {self.raw!r}")
        elif self.raw is not None:
            raise ValueError(f"{self.kind.value} power state takes no raw byte")

    @classmethod
    def decode(cls, byte: int) -> PowerState:
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Status byte out of range: {byte}")
        kind = _DECODE.get(byte)
        if kind is None:
            return cls(PowerKind.UNKNOWN, raw=byte)
        return cls(kind)

    def encode(self) -> int:
        if self.kind is PowerKind.UNKNOWN:
            return self.raw
        return _ENCODE[self.kind]

    def __str__(self) -> str:
        if self.kind is PowerKind.UNKNOWN:
            return f"UNKNOWN(0x{self.raw:02x})"
        return self.kind.value


SLEEP = PowerState(PowerKind.SLEEP)
BOOTING = PowerState(PowerKind.BOOTING)
STANDBY = PowerState(PowerKind.STANDBY)
ON = PowerState(PowerKind.ON)


class Command(str, enum.Enum):
    ON = "on"
    SLEEP = "sleep"
    STANDBY = "standby"
    SCAN = "scan"

    @property
    def target_state(self) -> PowerState | None:
        return _COMMAND_TARGETS.get(self)


_COMMAND_TARGETS: dict[Command, PowerState] = {
    Command.ON: ON,
    Command.SLEEP: SLEEP,
    Command.STANDBY: STANDBY,
}


class EventKind(enum.Enum):
    DISCOVERED = "discovered"
    UPDATED = "updated"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    STATE_CHANGED = "state_changed"


@dataclass(frozen=True)
class CentralEvent:
    kind: EventKind
    device_id: str


@dataclass(frozen=True)
class AdvertisedProperties:
    local_name: str | None
    manufacturer_data: dict[int, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class Characteristic:
    uuid: str
    handle: int | None = None


@dataclass(frozen=True)
class Lighthouse:
    """A discovered base station ready to be read from and written to."""

    name: str
    peripheral: Peripheral
    characteristic: Characteristic


@dataclass(frozen=True)
class StateReport:
    name: str
    current: PowerState
    target: PowerState | None
    written: bool

    def line(self) -> str:
        if self.target is None:
            return f"{self.name}: {self.current}"
        return f"{self.name}: {self.current} -> {self.target}"
