"""
Cartridge trust boundary.

RateLimiter bounds how often operations run; CartridgeValidator screens
cartridges at admission and wraps them in execution governors.
"""

from .rate_limiter import RateLimiter
from .validator import CartridgeValidator, ExecutionGovernor, GovernedCartridge

__all__ = ["RateLimiter", "CartridgeValidator", "ExecutionGovernor", "GovernedCartridge"]
