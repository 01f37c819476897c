"""Engine programs: ordered DEF/CDEF/VDEF/PRINT/XPORT statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from rrd_connector.domain.enums import ConsolidationFunction
from rrd_connector.domain.expressions import Expression, PercentileOf, Reduction


@dataclass(frozen=True)
class Define:
    """Read a dataset from an archive file."""

    name: str
    archive_path: str
    dataset_name: str
    consolidation: ConsolidationFunction = ConsolidationFunction.AVERAGE

    def render(self) -> str:
        return (
            f"DEF:{self.name}={_escape(self.archive_path)}:{self.dataset_name}"
            f":{self.consolidation.value}"
        )


@dataclass(frozen=True)
class Derive:
    """Derive a series from an RPN expression over prior identifiers."""

    name: str
    expression: Expression

    def render(self) -> str:
        return f"CDEF:{self.name}={self.expression.render()}"


@dataclass(frozen=True)
class Summarize:
    """Reduce a series to a single value."""

    name: str
    expression: Reduction | PercentileOf

    def render(self) -> str:
        return f"VDEF:{self.name}={self.expression.render()}"


@dataclass(frozen=True)
class Print:
    """Print a reduced value as ``label,key,value``.

    The label is part of the format string, so ``%`` is doubled.
    """

    name: str
    label: str
    key: str

    def render(self) -> str:
        return f"PRINT:{self.name}:{_escape(self.label).replace('%', '%%')},{self.key},%lf"


@dataclass(frozen=True)
class Export:
    """Mark a series as an export column."""

    name: str
    legend: str

    def render(self) -> str:
        return f"XPORT:{self.name}:{_escape(self.legend)}"


Statement = Union[Define, Derive, Summarize, Print, Export]


@dataclass
class Program:
    """Ordered list of engine statements."""

    statements: list[Statement] = field(default_factory=list)

    def add(self, statement: Statement) -> None:
        """Append a statement."""
        self.statements.append(statement)

    def is_empty(self) -> bool:
        """Whether the program defines nothing."""
        return not self.statements

    def exports(self) -> list[str]:
        """Identifiers marked as export columns, in order."""
        return [s.name for s in self.statements if isinstance(s, Export)]

    def render(self) -> list[str]:
        """Render statements to engine arguments."""
        return [statement.render() for statement in self.statements]


def _escape(value: str) -> str:
    # Colons separate statement fields
    return value.replace(":", "\\:")
