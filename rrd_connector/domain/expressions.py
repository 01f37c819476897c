"""Typed RPN expression tree.

Expressions are built as plain dataclasses by the query compiler and only
turned into the engine's comma-separated reverse-Polish text by ``render()``
when a program is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from rrd_connector.domain.enums import StatisticKind


@dataclass(frozen=True)
class Reference:
    """Reference to a previously defined identifier."""

    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class Constant:
    """Numeric literal.

    Floats render with six decimals, integers as-is (used for the Avg count).
    """

    value: float | int

    def render(self) -> str:
        if isinstance(self.value, int):
            return str(self.value)
        return f"{self.value:f}"


@dataclass(frozen=True)
class BinaryOp:
    """Arithmetic operator applied to two operands."""

    operator: str
    left: Expression
    right: Expression

    def render(self) -> str:
        return f"{self.left.render()},{self.right.render()},{self.operator}"


@dataclass(frozen=True)
class IsUnknown:
    """Unknown-value test (``UN``)."""

    operand: Expression

    def render(self) -> str:
        return f"{self.operand.render()},UN"


@dataclass(frozen=True)
class Conditional:
    """Conditional select (``IF``)."""

    condition: Expression
    when_true: Expression
    when_false: Expression

    def render(self) -> str:
        return (
            f"{self.condition.render()},{self.when_true.render()},"
            f"{self.when_false.render()},IF"
        )


@dataclass(frozen=True)
class PercentileOf:
    """Percentile reduction over an identifier (``PERCENT``)."""

    operand: Reference
    percentile: float

    def render(self) -> str:
        return f"{self.operand.render()},{self.percentile:f},PERCENT"


@dataclass(frozen=True)
class Reduction:
    """Summary reduction over an identifier (``MINIMUM``, ``AVERAGE``, ...)."""

    operand: Reference
    kind: StatisticKind

    def render(self) -> str:
        return f"{self.operand.render()},{self.kind.reduction}"


Expression = Union[Reference, Constant, BinaryOp, IsUnknown, Conditional, PercentileOf, Reduction]


def scaled(operand: Expression, factor: float) -> Expression:
    """Multiply by ``factor``, or return ``operand`` untouched when it is 0."""
    if factor == 0:
        return operand
    return BinaryOp("*", operand, Constant(float(factor)))


def unknown_as_zero(operand: Reference) -> Expression:
    """Substitute unknown samples with 0."""
    return Conditional(IsUnknown(operand), Constant(0), operand)


def sum_of(operands: list[Expression]) -> Expression:
    """Left-to-right addition: ``a,b,+,c,+``."""
    if not operands:
        raise ValueError("Cannot sum an empty operand list")

    result = operands[0]
    for operand in operands[1:]:
        result = BinaryOp("+", result, operand)
    return result
