# --- src/dcsim_core/units.py ---
import logging
import math
import re

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

# SPICE engineering multipliers. 'meg' must be tried before 'm' (milli).
SPICE_SUFFIXES = {
    "t": 1e12,
    "g": 1e9,
    "meg": 1e6,
    "k": 1e3,
    "m": 1e-3,
    "u": 1e-6,
    "n": 1e-9,
    "p": 1e-12,
    "f": 1e-15,
}

NUMBER_FRAGMENT = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
SPICE_VALUE_REGEX = re.compile(
    rf"^(?P<number>{NUMBER_FRAGMENT})(?P<suffix>meg|[tgkmunpf])?(?P<unit>[a-z]*)$",
    re.IGNORECASE,
)


def parse_spice_value(token: str) -> float:
    """
    Converts a SPICE value token such as '4.7k', '10uF', '1meg' or '2.5e-3' to a float.
    Trailing unit letters after the multiplier are ignored, as SPICE does.

    Raises:
        ValueError: if the token is not a SPICE number.
    """
    match = SPICE_VALUE_REGEX.match(token.strip())
    if not match:
        raise ValueError(f"'{token}' is not a valid SPICE numeric value.")
    value = float(match.group("number"))
    suffix = match.group("suffix")
    if suffix:
        value *= SPICE_SUFFIXES[suffix.lower()]
    return value


def format_quantity(value: float, unit: str, precision: int = 4) -> str:
    """Formats a value in SI base units with a compact prefix, e.g. 4700 ohm -> '4.7000 kΩ'."""
    qty = Quantity(value, unit)
    if value != 0.0 and math.isfinite(value):
        qty = qty.to_compact()
    return f"{qty.magnitude:.{precision}f} {qty.units:~P}"
