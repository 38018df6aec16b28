"""
Chart element formulas.

A formula is parsed once, when its chart configuration is loaded, into a
small expression tree:

    FieldRef    one StatRecord field
    Sum         a + b + ...
    Ratio       a / b
    Percentage  (a / b) * 100, kept as the fraction a / b

Evaluation is three-valued: a number, the NA sentinel when any referenced
field is missing, or 0 for a division by zero.

Accepted syntax:
    [REMOTE_IMAGES]        upper-case token, mapped to 'remoteImages'
    [stats.remoteImages]   bracketed stats path
    stats.remoteImages     bare stats path
    remoteImages           bare field name
    ( ... )                grouping
"""
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple, Union

from messmass.records import is_number, resolve_field_name


class NotApplicable:
    """Sentinel for a value whose inputs are absent. Distinct from zero."""
    _instance: Optional[NotApplicable] = None

    def __new__(cls) -> NotApplicable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NA'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (NotApplicable, ())


NA = NotApplicable()

Value = Union[float, NotApplicable]


class FormulaSyntaxError(ValueError):
    """Raised when a formula string cannot be parsed."""


@dataclass(frozen=True)
class FieldRef:
    name: str

    def evaluate(self, record: Mapping[str, Any]) -> Value:
        value = record.get(self.name)
        if is_number(value):
            return float(value)
        return NA

    def fields(self) -> FrozenSet[str]:
        return frozenset({self.name})


@dataclass(frozen=True)
class Sum:
    terms: Tuple['Expression', ...]

    def evaluate(self, record: Mapping[str, Any]) -> Value:
        total = 0.0
        for term in self.terms:
            value = term.evaluate(record)
            if value is NA:
                return NA
            total += value
        return total

    def fields(self) -> FrozenSet[str]:
        return frozenset().union(*(term.fields() for term in self.terms))


@dataclass(frozen=True)
class Ratio:
    numerator: 'Expression'
    denominator: 'Expression'

    def evaluate(self, record: Mapping[str, Any]) -> Value:
        numerator = self.numerator.evaluate(record)
        denominator = self.denominator.evaluate(record)
        if numerator is NA or denominator is NA:
            return NA
        if denominator == 0:
            return 0.0
        return numerator / denominator

    def fields(self) -> FrozenSet[str]:
        return self.numerator.fields() | self.denominator.fields()


@dataclass(frozen=True)
class Percentage:
    """part / whole as a fraction; multiplied by 100 only when formatted."""
    part: 'Expression'
    whole: 'Expression'

    def evaluate(self, record: Mapping[str, Any]) -> Value:
        return Ratio(self.part, self.whole).evaluate(record)

    def fields(self) -> FrozenSet[str]:
        return self.part.fields() | self.whole.fields()


Expression = Union[FieldRef, Sum, Ratio, Percentage]

_TOKEN_RE = re.compile(r'\s*(?:\[([^\]]*)\]|([A-Za-z_][A-Za-z0-9_.]*)|(\d+(?:\.\d+)?)|(\S))')


def _tokenize(text: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            break
        bracketed, ident, number, symbol = match.groups()
        if bracketed is not None:
            if not bracketed.strip():
                raise FormulaSyntaxError(f"Empty field reference in {text!r}")
            tokens.append(('field', bracketed))
        elif ident is not None:
            tokens.append(('field', ident))
        elif number is not None:
            tokens.append(('number', number))
        elif symbol in '+/*()':
            tokens.append(('op', symbol))
        else:
            raise FormulaSyntaxError(f"Unexpected character {symbol!r} in {text!r}")
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def parse(self) -> Expression:
        if not self.tokens:
            raise FormulaSyntaxError("Formula is empty")
        node = self._expression()
        if self.pos != len(self.tokens):
            raise FormulaSyntaxError(f"Unexpected {self.tokens[self.pos][1]!r} in {self.text!r}")
        return node

    def _peek(self, value: str) -> bool:
        return self.pos < len(self.tokens) and self.tokens[self.pos] == ('op', value)

    def _expression(self) -> Expression:
        node = self._sum()
        if self._peek('*'):
            self.pos += 1
            if self.pos >= len(self.tokens) or self.tokens[self.pos] != ('number', '100'):
                raise FormulaSyntaxError(f"Only '* 100' is supported, in {self.text!r}")
            self.pos += 1
            if not isinstance(node, Ratio):
                raise FormulaSyntaxError(f"'* 100' must follow a division, in {self.text!r}")
            node = Percentage(node.numerator, node.denominator)
        return node

    def _sum(self) -> Expression:
        terms = [self._ratio()]
        while self._peek('+'):
            self.pos += 1
            terms.append(self._ratio())
        return terms[0] if len(terms) == 1 else Sum(tuple(terms))

    def _ratio(self) -> Expression:
        # '/' binds tighter than '+'
        node = self._operand()
        if self._peek('/'):
            self.pos += 1
            node = Ratio(node, self._operand())
        return node

    def _operand(self) -> Expression:
        if self.pos >= len(self.tokens):
            raise FormulaSyntaxError(f"Unexpected end of formula {self.text!r}")
        kind, value = self.tokens[self.pos]
        self.pos += 1
        if kind == 'field':
            return FieldRef(resolve_field_name(value))
        if (kind, value) == ('op', '('):
            node = self._expression()
            if not self._peek(')'):
                raise FormulaSyntaxError(f"Missing ')' in {self.text!r}")
            self.pos += 1
            return node
        raise FormulaSyntaxError(f"Unexpected {value!r} in {self.text!r}")


def parse_formula(text: str) -> Expression:
    """
    Parse a formula string into an expression tree.

    Raises:
        FormulaSyntaxError: For empty or unsupported formulas.
    """
    if not isinstance(text, str):
        raise FormulaSyntaxError(f"Formula must be a string, got {type(text).__name__}")
    return _Parser(text).parse()


@dataclass(frozen=True)
class Formula:
    """A parsed formula together with its source text."""
    source: str
    expression: Expression

    @classmethod
    def parse(cls, text: str) -> Formula:
        return cls(source=text, expression=parse_formula(text))

    @property
    def is_percentage(self) -> bool:
        return isinstance(self.expression, Percentage)

    @property
    def fields(self) -> FrozenSet[str]:
        return self.expression.fields()

    def evaluate(self, record: Mapping[str, Any]) -> Value:
        return self.expression.evaluate(record)

    def resolve_text(self, record: Mapping[str, Any]) -> Union[str, Value]:
        """Raw text value for single-field formulas (text/image charts), else the numeric result."""
        if isinstance(self.expression, FieldRef):
            value = record.get(self.expression.name)
            if isinstance(value, str):
                return value if value.strip() else NA
        return self.evaluate(record)
