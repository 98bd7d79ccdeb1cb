#!/usr/bin/env python3
"""
Ratio Engine Errors

Every error raised by the fixed-point math derives from ValueError so callers
that already guard math helpers with ``except ValueError`` keep working.
"""


class RatioEngineError(ValueError):
    """Base class for all ratio engine failures"""


class InvalidIntervalError(RatioEngineError):
    """Interval has lower >= upper, or the short interval escapes the domain"""


class TickOutOfRangeError(InvalidIntervalError):
    """Tick outside [MIN_TICK, MAX_TICK]"""


class PriceOutOfDomainError(RatioEngineError):
    """Current price lies outside the domain interval (skip this cycle)"""

    def __init__(self, message: str, sqrt_price_x96: int = None,
                 lower_sqrt_price_x96: int = None, upper_sqrt_price_x96: int = None):
        super().__init__(message)
        self.sqrt_price_x96 = sqrt_price_x96
        self.lower_sqrt_price_x96 = lower_sqrt_price_x96
        self.upper_sqrt_price_x96 = upper_sqrt_price_x96


class DegenerateCapitalError(RatioEngineError):
    """Total capital is zero (or a capital figure is negative)"""


class PrecisionOverflowError(RatioEngineError):
    """Intermediate or result does not fit the 256-bit word used on-chain"""


class RatioComputationError(RatioEngineError):
    """A computed ratio came out negative or the normalizer vanished"""
