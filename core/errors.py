"""
Cartridge error taxonomy.

Every error here is local-recoverable: admission errors reject one
registration attempt, per-frame errors are caught by the registry and
logged for the offending cartridge only.
"""


class CartridgeError(Exception):
    """Base class for cartridge admission and runtime failures."""
    pass


class ValidationError(CartridgeError):
    """Raised when a candidate is malformed or fails the safety screen."""
    pass


class CapacityError(CartridgeError):
    """Raised when the registry already holds its maximum number of cartridges."""
    pass


class RateLimitError(CartridgeError):
    """Raised when too many operations of one kind happen within the window."""
    pass


class ExecutionLimitError(CartridgeError):
    """Raised by a governed cartridge call that ran too long."""
    pass


class RegistrationTimeoutError(CartridgeError, TimeoutError):
    """Raised when a registration did not finish within the operation timeout."""
    pass
