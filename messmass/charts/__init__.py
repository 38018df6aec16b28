"""Chart configurations, formulas and the chart calculator."""

from .calculator import (
    ChartValidationReport,
    calculate_active_charts,
    calculate_chart,
    calculate_charts,
    calculation_summary,
    validate_chart_with_stats,
)
from .formatting import api_number, format_value, round_half_up
from .formula import NA, FieldRef, Formula, FormulaSyntaxError, NotApplicable, Percentage, Ratio, Sum, parse_formula
from .model import (
    ELEMENT_COUNTS,
    ChartCalculationResult,
    ChartConfiguration,
    ChartElement,
    ChartValidationError,
    ElementResult,
)

__all__ = [
    'ChartValidationReport',
    'calculate_active_charts',
    'calculate_chart',
    'calculate_charts',
    'calculation_summary',
    'validate_chart_with_stats',
    'api_number',
    'format_value',
    'round_half_up',
    'NA',
    'FieldRef',
    'Formula',
    'FormulaSyntaxError',
    'NotApplicable',
    'Percentage',
    'Ratio',
    'Sum',
    'parse_formula',
    'ELEMENT_COUNTS',
    'ChartCalculationResult',
    'ChartConfiguration',
    'ChartElement',
    'ChartValidationError',
    'ElementResult',
]
