"""
Error taxonomy for the probe.

ConfigError and ParseError are fatal and abort the run before any network
activity. SubmitError and AwaitError are per-attempt and end up in the report.
"""


class ProbeError(Exception):
    """Base class for all probe errors."""
    pass


class ConfigError(ProbeError):
    """Raised when a configuration value is missing or invalid."""
    pass


class ParseError(ProbeError):
    """Raised when an address or amount cannot be parsed."""
    pass


class SubmitError(ProbeError):
    """Raised when signing or submitting a transaction fails."""
    pass


class AwaitError(ProbeError):
    """Raised when waiting for a receipt fails."""
    pass
