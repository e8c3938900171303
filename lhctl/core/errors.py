"""Domain-specific errors for lhctl."""


class LhctlError(Exception):
    """Base error for lhctl."""


class ConfigError(LhctlError):
    """Raised when the user configuration file is unreadable or invalid."""


class AdapterError(LhctlError):
    """Raised when the radio adapter cannot scan or deliver events."""


class ResolutionError(LhctlError):
    """Raised when a device identifier cannot be resolved to a peripheral."""


class DeviceConnectionError(LhctlError):
    """Raised on connect/disconnect failures."""


class EnumerationError(LhctlError):
    """Raised when service discovery on a peripheral fails."""


class TransportError(LhctlError):
    """Raised when a characteristic read or write fails."""
