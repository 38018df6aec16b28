"""
Chart calculator: evaluates chart configurations against a StatRecord.

The record can be one event's stats or an aggregate. Each configuration
yields exactly one ChartCalculationResult, in input order. Charts whose
elements are all NA are still returned; hiding them is up to the caller
(see ChartCalculationResult.is_displayable).
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from messmass.charts.formula import NA
from messmass.charts.model import (
    ChartCalculationResult,
    ChartConfiguration,
    ElementResult,
    ElementValue,
)
from messmass.records import StatRecord, is_number, numeric_value

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r'\{\{([^}]+)\}\}')


def with_derived_fields(record: Mapping[str, Any]) -> StatRecord:
    """
    Copy of record with 'totalFans' and 'allImages' filled in when their
    inputs are present. Stored values are never overwritten.
    """
    stats = dict(record)
    if 'totalFans' not in stats:
        remote = numeric_value(stats, 'remoteFans')
        if remote is None and any(is_number(stats.get(k)) for k in ('indoor', 'outdoor')):
            remote = (numeric_value(stats, 'indoor') or 0.0) + (numeric_value(stats, 'outdoor') or 0.0)
        stadium = numeric_value(stats, 'stadium')
        if remote is not None or stadium is not None:
            stats['totalFans'] = (remote or 0.0) + (stadium or 0.0)
    if 'allImages' not in stats:
        parts = [numeric_value(stats, k) for k in ('remoteImages', 'hostessImages', 'selfies')]
        if any(p is not None for p in parts):
            stats['allImages'] = sum(p for p in parts if p is not None)
    return stats


def resolve_placeholders(text: Optional[str], record: Mapping[str, Any]) -> Optional[str]:
    """Replace '{{stats.field}}' placeholders with record values; unknown fields become 'N/A'."""
    if not text or '{{' not in text:
        return text

    def _replace(match: re.Match) -> str:
        name = match.group(1).strip()
        if name.startswith('stats.'):
            name = name[len('stats.'):]
        value = record.get(name)
        if value is None:
            return 'N/A'
        if is_number(value) and float(value).is_integer():
            return str(int(value))
        return str(value)

    return _PLACEHOLDER_RE.sub(_replace, text)


def calculate_chart(config: ChartConfiguration, record: Mapping[str, Any]) -> ChartCalculationResult:
    """
    Evaluate one chart configuration.

    Args:
        config: Parsed chart configuration.
        record: StatRecord or aggregate stats.

    Returns:
        ChartCalculationResult: Element values (unrounded numbers, text or NA).
    """
    stats = with_derived_fields(record)
    errors: List[str] = []
    has_errors = False
    textual = config.chart_type in ('text', 'image')

    elements: List[ElementResult] = []
    for element in config.elements:
        try:
            value: ElementValue = element.formula.resolve_text(stats) if textual else element.formula.evaluate(stats)
        except Exception as e:
            logger.error(f"Error evaluating element {element.element_id!r} of chart {config.chart_id!r}: {e}", exc_info=True)
            errors.append(f"{element.element_id}: {e}")
            value = NA
        if value is NA:
            has_errors = True
            logger.debug(f"Element {element.element_id!r} of chart {config.chart_id!r} is not applicable ({element.formula.source})")
        elements.append(ElementResult(
            element_id=element.element_id,
            label=resolve_placeholders(element.label, stats) or element.label,
            value=value,
            color=element.color,
            value_format=element.value_format,
            prefix=element.prefix,
            suffix=element.suffix,
        ))

    total: Optional[ElementValue] = None
    kpi_value: Optional[ElementValue] = None
    if config.chart_type in ('kpi', 'text', 'image'):
        kpi_value = elements[0].value
    elif config.chart_type == 'bar' and config.show_total:
        total = _bar_total(config, stats, elements)
        if total is NA or any(e.is_na for e in elements):
            has_errors = True

    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        chart_type=config.chart_type,
        elements=tuple(elements),
        subtitle=resolve_placeholders(config.subtitle, stats),
        emoji=config.emoji,
        total=total,
        total_label=config.total_label,
        kpi_value=kpi_value,
        has_errors=has_errors,
        errors=tuple(errors),
    )


def _bar_total(config: ChartConfiguration, stats: StatRecord, elements: List[ElementResult]) -> ElementValue:
    if config.total_formula is not None:
        return config.total_formula.evaluate(stats)
    values = [e.value for e in elements if is_number(e.value)]
    if not values:
        return NA
    return float(sum(values))


def calculate_charts(configs: Iterable[ChartConfiguration], record: Mapping[str, Any]) -> List[ChartCalculationResult]:
    """One result per configuration, in the order given."""
    configs = list(configs)
    results = [calculate_chart(config, record) for config in configs]
    logger.debug(f"Calculated {len(results)} charts")
    return results


def calculate_active_charts(configs: Iterable[ChartConfiguration], record: Mapping[str, Any]) -> List[ChartCalculationResult]:
    """Calculate only active configurations, keeping their relative order."""
    configs = list(configs)
    active = [config for config in configs if config.is_active]
    logger.debug(f"Calculating {len(active)} active charts ({len(configs) - len(active)} inactive)")
    return calculate_charts(active, record)


@dataclass
class ChartValidationReport:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    result: Optional[ChartCalculationResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isValid': self.is_valid,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'result': self.result.to_dict() if self.result else None,
        }


def validate_chart_with_stats(config: ChartConfiguration, record: Mapping[str, Any]) -> ChartValidationReport:
    """
    Check that a configuration produces sensible values for a record.

    Errors: evaluation failures. Warnings: NA elements, negative values,
    pie charts whose elements sum to zero.
    """
    report = ChartValidationReport(is_valid=True)
    result = calculate_chart(config, record)
    report.result = result
    report.errors.extend(result.errors)

    for element in result.elements:
        if element.is_na:
            report.warnings.append(f"Element '{element.label}' is not applicable for these stats")
        elif is_number(element.value) and element.value < 0:
            report.warnings.append(f"Element '{element.label}' has a negative value ({element.value})")

    if config.chart_type == 'pie':
        values = [e.value for e in result.elements if is_number(e.value)]
        if values and sum(values) == 0:
            report.warnings.append("Pie chart elements sum to zero")

    report.is_valid = not report.errors
    return report


def calculation_summary(results: Iterable[ChartCalculationResult]) -> Dict[str, Any]:
    """Counts of charts, charts with errors, NA elements and charts per type."""
    results = list(results)
    by_type: Dict[str, int] = {}
    for result in results:
        by_type[result.chart_type] = by_type.get(result.chart_type, 0) + 1
    return {
        'totalCharts': len(results),
        'chartsWithErrors': sum(1 for r in results if r.has_errors),
        'displayableCharts': sum(1 for r in results if r.is_displayable),
        'totalElements': sum(len(r.elements) for r in results),
        'naElements': sum(1 for r in results for e in r.elements if e.is_na),
        'chartTypes': by_type,
    }
