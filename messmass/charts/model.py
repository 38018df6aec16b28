"""
Chart configuration and calculation result models.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union, get_args

from messmass.charts.formatting import ValueFormat, api_number, format_value
from messmass.charts.formula import NA, Formula, FormulaSyntaxError, NotApplicable

ChartType = Literal['pie', 'bar', 'kpi', 'text', 'image']

# Number of elements each chart type must have
ELEMENT_COUNTS: Dict[str, int] = {
    'pie': 2,
    'bar': 5,
    'kpi': 1,
    'text': 1,
    'image': 1,
}

# Chart types hidden by the presentation layer when every element is NA
NUMERIC_CHART_TYPES = frozenset({'pie', 'bar', 'kpi'})

DEFAULT_ELEMENT_COLOR = '#cccccc'

ElementValue = Union[float, str, NotApplicable]


class ChartValidationError(ValueError):
    """Raised when a chart configuration is malformed."""


@dataclass(frozen=True)
class ChartElement:
    """
    One formula-bound value within a chart.

    Attributes:
        element_id (str): Identifier within the chart.
        label (str): Display label; may contain '{{stats.field}}' placeholders.
        formula (Formula): Parsed formula.
        color (str): Display color.
        value_format (ValueFormat): 'number', 'percentage' or 'currency'.
        prefix (Optional[str]): Overrides the default formatted prefix.
        suffix (Optional[str]): Overrides the default formatted suffix.
    """
    element_id: str
    label: str
    formula: Formula
    color: str = DEFAULT_ELEMENT_COLOR
    value_format: ValueFormat = 'number'
    prefix: Optional[str] = None
    suffix: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChartElement:
        formula_text = data.get('formula')
        try:
            formula = Formula.parse(formula_text)
        except FormulaSyntaxError as e:
            raise ChartValidationError(f"Element {data.get('id')!r}: {e}") from e

        formatting = data.get('formatting') or {}
        value_format = data.get('type')
        if value_format is None:
            value_format = 'percentage' if formula.is_percentage else 'number'
        if value_format not in get_args(ValueFormat):
            raise ChartValidationError(f"Element {data.get('id')!r}: unknown value type {value_format!r}")

        return cls(
            element_id=str(data.get('id') or ''),
            label=str(data.get('label') or ''),
            formula=formula,
            color=data.get('color') or DEFAULT_ELEMENT_COLOR,
            value_format=value_format,
            prefix=formatting.get('prefix'),
            suffix=formatting.get('suffix'),
        )


@dataclass(frozen=True)
class ChartConfiguration:
    """
    Declarative chart description.

    The element count is fixed per chart type (see ELEMENT_COUNTS); a
    mismatch raises ChartValidationError at construction.
    """
    chart_id: str
    title: str
    chart_type: ChartType
    elements: Tuple[ChartElement, ...]
    order: int = 0
    is_active: bool = True
    subtitle: Optional[str] = None
    emoji: Optional[str] = None
    show_total: bool = False
    total_label: Optional[str] = None
    total_formula: Optional[Formula] = None

    def __post_init__(self) -> None:
        if not self.chart_id:
            raise ChartValidationError("Chart configuration needs a chart id")
        expected = ELEMENT_COUNTS.get(self.chart_type)
        if expected is None:
            raise ChartValidationError(f"Chart {self.chart_id!r}: unknown chart type {self.chart_type!r}")
        object.__setattr__(self, 'elements', tuple(self.elements))
        if len(self.elements) != expected:
            raise ChartValidationError(
                f"Chart {self.chart_id!r}: {self.chart_type} charts need exactly {expected} "
                f"element{'s' if expected != 1 else ''}, got {len(self.elements)}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChartConfiguration:
        """
        Build from a stored camelCase configuration document.

        Formulas are parsed here, once.

        Raises:
            ChartValidationError: For unknown types, wrong element counts or bad formulas.
        """
        elements = data.get('elements')
        if not isinstance(elements, (list, tuple)):
            raise ChartValidationError(f"Chart {data.get('chartId')!r}: elements must be a list")

        total_formula = None
        if data.get('totalFormula'):
            try:
                total_formula = Formula.parse(data['totalFormula'])
            except FormulaSyntaxError as e:
                raise ChartValidationError(f"Chart {data.get('chartId')!r}: total formula: {e}") from e

        is_active = data.get('isActive')
        return cls(
            chart_id=str(data.get('chartId') or ''),
            title=str(data.get('title') or ''),
            chart_type=data.get('type'),
            elements=tuple(ChartElement.from_dict(e) for e in elements),
            order=int(data.get('order') or 0),
            is_active=True if is_active is None else bool(is_active),
            subtitle=data.get('subtitle'),
            emoji=data.get('emoji'),
            show_total=bool(data.get('showTotal', False)),
            total_label=data.get('totalLabel'),
            total_formula=total_formula,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chartId': self.chart_id,
            'title': self.title,
            'type': self.chart_type,
            'order': self.order,
            'isActive': self.is_active,
            'subtitle': self.subtitle,
            'emoji': self.emoji,
            'showTotal': self.show_total,
            'totalLabel': self.total_label,
            'totalFormula': self.total_formula.source if self.total_formula else None,
            'elements': [
                {
                    'id': e.element_id,
                    'label': e.label,
                    'formula': e.formula.source,
                    'color': e.color,
                    'type': e.value_format,
                    'formatting': {'prefix': e.prefix, 'suffix': e.suffix},
                }
                for e in self.elements
            ],
        }


@dataclass(frozen=True)
class ElementResult:
    element_id: str
    label: str
    value: ElementValue
    color: str = DEFAULT_ELEMENT_COLOR
    value_format: ValueFormat = 'number'
    prefix: Optional[str] = None
    suffix: Optional[str] = None

    @property
    def is_na(self) -> bool:
        return self.value is NA

    @property
    def formatted(self) -> str:
        return format_value(self.value, self.value_format, self.prefix, self.suffix)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.element_id,
            'label': self.label,
            'value': _api_value(self.value, self.value_format),
            'formatted': self.formatted,
            'color': self.color,
            'type': self.value_format,
        }


@dataclass(frozen=True)
class ChartCalculationResult:
    """
    Calculated values of one chart.

    Values are unrounded; `to_dict` applies the API number formatting.
    """
    chart_id: str
    title: str
    chart_type: ChartType
    elements: Tuple[ElementResult, ...] = ()
    subtitle: Optional[str] = None
    emoji: Optional[str] = None
    total: Optional[ElementValue] = None
    total_label: Optional[str] = None
    kpi_value: Optional[ElementValue] = None
    has_errors: bool = False
    errors: Tuple[str, ...] = ()

    @property
    def is_displayable(self) -> bool:
        """False for pie/bar/kpi charts whose every element is NA."""
        if self.chart_type in NUMERIC_CHART_TYPES:
            return any(not e.is_na for e in self.elements)
        return self.kpi_value is not None and self.kpi_value is not NA

    def to_dict(self) -> Dict[str, Any]:
        value_format = self.elements[0].value_format if self.elements else 'number'
        return {
            'chartId': self.chart_id,
            'title': self.title,
            'type': self.chart_type,
            'subtitle': self.subtitle,
            'emoji': self.emoji,
            'elements': [e.to_dict() for e in self.elements],
            'total': _api_value(self.total, value_format),
            'totalLabel': self.total_label,
            'kpiValue': _api_value(self.kpi_value, value_format),
            'hasErrors': self.has_errors,
            'isDisplayable': self.is_displayable,
            'errors': list(self.errors),
        }


def _api_value(value: Optional[ElementValue], value_format: ValueFormat) -> Any:
    if value is None:
        return None
    if value is NA:
        return 'NA'
    if isinstance(value, str):
        return value
    return api_number(value, value_format)
