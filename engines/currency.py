"""
Currency & Percent String Contract

Every dollar amount leaves the engines as a compact string ("$5K", "$1.2M")
and comes back in through parse_currency_string. Both directions must match
the strings the assessment tool already stores, so rounding follows the
JavaScript toFixed rule: the sign comes off, then the exact binary
magnitude is rounded half up (ties away from zero), never half-to-even.
"""
import logging
import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext

SUFFIX_MULTIPLIERS = {'M': 1_000_000, 'K': 1_000, 'B': 1_000_000_000}

_STRIP_CHARS = re.compile(r'[,$\s]')
_NUMBER_PREFIX = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def _to_fixed(value, digits):
    """Render value with a fixed number of decimals the way JS toFixed does."""
    with localcontext() as ctx:
        ctx.prec = 60
        d = Decimal(value)
        if d == 0:
            d = Decimal(0)
        q = Decimal(1).scaleb(-digits)
        sign = '-' if d < 0 else ''
        return sign + format(abs(d).quantize(q, rounding=ROUND_HALF_UP), 'f')


def coerce_number(value, default=0.0):
    """Best-effort float conversion; None, blanks and garbage give default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    text = str(value).strip()
    if not text:
        return default
    m = _NUMBER_PREFIX.match(_STRIP_CHARS.sub('', text))
    return float(m.group(0)) if m else default


def format_currency(value):
    """$1.2M for millions, $45K for thousands, $830 below that."""
    value = coerce_number(value)
    if abs(value) >= 1_000_000:
        return f"${_to_fixed(value / 1_000_000, 1)}M"
    if abs(value) >= 1_000:
        return f"${_to_fixed(value / 1_000, 0)}K"
    return f"${_to_fixed(value, 0)}"


def format_percent(value):
    """0.123 -> '12.3%'."""
    return f"{_to_fixed(coerce_number(value) * 100, 1)}%"


def parse_currency_string(value):
    """
    Inverse of format_currency. Strips $, commas and whitespace, honours a
    trailing M / K / B suffix and reads the leading number leniently.
    Anything unparsable is 0.0; this never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0

    clean = _STRIP_CHARS.sub('', str(value))
    multiplier = SUFFIX_MULTIPLIERS.get(clean[-1:], 1)
    m = _NUMBER_PREFIX.match(clean)
    if not m:
        logging.debug(f"parse_currency_string: unparsable amount {value!r}, using 0")
        return 0.0
    return float(m.group(0)) * multiplier
