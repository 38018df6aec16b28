"""
Number formatting at the presentation boundary.

Values stay unrounded through every calculation. Rounding happens here, once:
percentages to one decimal in percent-space, counts and currency to the
nearest integer (half away from zero).
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Literal, Mapping, Optional, Union

from messmass.charts.formula import NA, NotApplicable
from messmass.records import is_number

ValueFormat = Literal['number', 'percentage', 'currency']

NA_TEXT = 'N/A'
DEFAULT_CURRENCY_PREFIX = '€'


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a person would: 2.5 -> 3, 0.25 -> 0.3 (one digit)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def api_number(value: Union[float, NotApplicable, None], value_format: ValueFormat = 'number') -> Optional[Union[int, float]]:
    """
    Numeric form of a value for API responses.

    Percentages (fractions internally) become percent-space floats with one
    decimal; counts and currency become integers; NA becomes None.
    """
    if value is NA or value is None:
        return None
    if value_format == 'percentage':
        return round_half_up(value * 100, 1)
    return int(round_half_up(value))


def format_value(value: Union[float, str, NotApplicable, None], value_format: ValueFormat = 'number',
                 prefix: Optional[str] = None, suffix: Optional[str] = None) -> str:
    """
    Human-readable form of a chart value.

    Args:
        value: Number, text, NA or None.
        value_format: 'number', 'percentage' (fraction in [0, 1]) or 'currency'.
        prefix: Overrides the default prefix (currency symbol).
        suffix: Overrides the default suffix ('%' for percentages).
    """
    if value is NA or value is None:
        return NA_TEXT
    if isinstance(value, str):
        return value

    if value_format == 'percentage':
        text = f"{round_half_up(value * 100, 1):.1f}"
        default_prefix, default_suffix = '', '%'
    elif value_format == 'currency':
        text = f"{int(round_half_up(value)):,}"
        default_prefix, default_suffix = DEFAULT_CURRENCY_PREFIX, ''
    else:
        text = f"{int(round_half_up(value)):,}"
        default_prefix, default_suffix = '', ''

    prefix = default_prefix if prefix is None else prefix
    suffix = default_suffix if suffix is None else suffix
    return f"{prefix}{text}{suffix}"


def api_stats(stats: Mapping[str, Any]) -> Dict[str, Any]:
    """
    StatRecord with every numeric value rounded to an integer.

    Counters are already integral; averaged currency fields are rounded here.
    Non-numeric values pass through unchanged.
    """
    return {
        key: int(round_half_up(value)) if is_number(value) else value
        for key, value in stats.items()
    }
