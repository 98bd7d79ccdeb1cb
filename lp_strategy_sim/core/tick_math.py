#!/usr/bin/env python3
"""
Uniswap V3 Tick Math - Exact Integer Implementation

Fixed-point helpers shared by the ratio engine:
- Tick <-> sqrt price conversion in Q64.96 using the AMM's bit constants
- 512-bit safe mul_div with uint256 result checks
- priceX96 derivation and exact decimal price parsing

No floating point is used anywhere in this module.
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

from .errors import PrecisionOverflowError, TickOutOfRangeError

# Uniswap V3 Constants
MIN_TICK = -887272
MAX_TICK = 887272
Q96 = 2 ** 96
MIN_SQRT_RATIO = 4295128739  # sqrt(1.0001^-887272) * 2^96
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342  # sqrt(1.0001^887272) * 2^96
UINT256_MAX = 2 ** 256 - 1

# 1 / sqrt(1.0001)^(2^i) in Q128.128, one entry per bit of |tick|
_TICK_BIT_MULTIPLIERS = (
    (0x1, 0xFFFCB933BD6FAD37AA2D162D1A594001),
    (0x2, 0xFFF97272373D413259A46990580E213A),
    (0x4, 0xFFF2E50F5F656932EF12357CF3C7FDCC),
    (0x8, 0xFFE5CACA7E10E4E61C3624EAA0941CD0),
    (0x10, 0xFFCB9843D60F6159C9DB58835C926644),
    (0x20, 0xFF973B41FA98C081472E6896DFB254C0),
    (0x40, 0xFF2EA16466C96A3843EC78B326B52861),
    (0x80, 0xFE5DEE046A99A2A811C461F1969C3053),
    (0x100, 0xFCBE86C7900A88AEDCFFC83B479AA3A4),
    (0x200, 0xF987A7253AC413176F2B074CF7815E54),
    (0x400, 0xF3392B0822B70005940C7A398E4B70F3),
    (0x800, 0xE7159475A2C29B7443B29C7FA6E889D9),
    (0x1000, 0xD097F3BDFD2022B8845AD8F792AA5825),
    (0x2000, 0xA9F746462D870FDF8A65DC1F90E061E5),
    (0x4000, 0x70D869A156D2A1B890BB3DF62BAF32F7),
    (0x8000, 0x31BE135F97D08FD981231505542FCFA6),
    (0x10000, 0x9AA508B5B7A84E1C677DE54F3E99BC9),
    (0x20000, 0x5D6AF8DEDB81196699C329225EE604),
    (0x40000, 0x2216E584F5FA1EA926041BEDFE98),
    (0x80000, 0x48A170391F7DC42444E8FA2),
)


# Safe math helpers
def mul_div(a: int, b: int, denominator: int) -> int:
    """Multiply two uint256 numbers and divide by denominator (512-bit intermediate)"""
    if denominator == 0:
        raise ValueError("Division by zero")
    _check_uint256(a, b, denominator)
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise PrecisionOverflowError(f"mul_div result {result} exceeds uint256")
    return result


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """Multiply and divide with rounding up"""
    if denominator == 0:
        raise ValueError("Division by zero")
    _check_uint256(a, b, denominator)
    result = (a * b + denominator - 1) // denominator
    if result > UINT256_MAX:
        raise PrecisionOverflowError(f"mul_div result {result} exceeds uint256")
    return result


def _check_uint256(*values: int):
    for value in values:
        if value < 0:
            raise ValueError(f"Negative operand {value} in unsigned math")
        if value > UINT256_MAX:
            raise PrecisionOverflowError(f"Operand {value} exceeds uint256")


def sqrt_price_at_tick(tick: int) -> int:
    """
    Convert tick to sqrt price in Q64.96 format.

    Bit-for-bit identical to TickMath.getSqrtRatioAtTick: the ratio is built
    in Q128.128 from per-bit constants, inverted for positive ticks, then
    shifted down to Q64.96 rounding up.
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise TickOutOfRangeError(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = abs(tick)
    ratio = 1 << 128
    for bit, multiplier in _TICK_BIT_MULTIPLIERS:
        if abs_tick & bit:
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


def tick_at_sqrt_price(sqrt_price_x96: int) -> int:
    """Greatest tick whose sqrt price is <= sqrt_price_x96 (binary search)"""
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrt_price_x96 {sqrt_price_x96} out of bounds")

    tick_low = MIN_TICK
    tick_high = MAX_TICK

    while tick_high - tick_low > 1:
        tick_mid = (tick_low + tick_high) // 2
        if sqrt_price_at_tick(tick_mid) <= sqrt_price_x96:
            tick_low = tick_mid
        else:
            tick_high = tick_mid

    return tick_low


def price_x96_from_sqrt_price(sqrt_price_x96: int) -> int:
    """priceX96 = sqrtPriceX96^2 / 2^96"""
    return mul_div(sqrt_price_x96, sqrt_price_x96, Q96)


def price_to_sqrt_price_x96(price: Union[str, Decimal, int, Fraction]) -> int:
    """Exact sqrt price (Q64.96, rounded down) for a decimal price such as "1.0002" """
    value = Fraction(str(price)) if not isinstance(price, Fraction) else price
    if value <= 0:
        raise ValueError(f"Price must be positive, got {price}")
    return math.isqrt(value.numerator * (1 << 192) // value.denominator)


def format_price_x96(price_x96: int, decimals: int = 5) -> str:
    """Render a Q96 price with a fixed number of decimals, truncating"""
    scale = 10 ** decimals
    scaled = mul_div(price_x96, scale, Q96)
    whole, fractional = divmod(scaled, scale)
    if decimals == 0:
        return str(whole)
    return f"{whole}.{fractional:0{decimals}d}"
