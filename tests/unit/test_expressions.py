"""Unit tests for RPN expressions and programs."""

import pytest

from rrd_connector.domain.enums import StatisticKind
from rrd_connector.domain.expressions import (
    BinaryOp,
    Constant,
    PercentileOf,
    Reduction,
    Reference,
    scaled,
    sum_of,
    unknown_as_zero,
)
from rrd_connector.domain.program import Define, Derive, Export, Print, Program, Summarize


def test_constant_render():
    """Test float constants use six decimals and integers render as-is."""
    assert Constant(2.0).render() == "2.000000"
    assert Constant(0.125).render() == "0.125000"
    assert Constant(3).render() == "3"


def test_scaled_without_factor():
    """Test zero scale leaves the operand untouched."""
    assert scaled(Reference("a"), 0) == Reference("a")
    assert scaled(Reference("a"), 0.0).render() == "a"


def test_scaled_with_factor():
    """Test scale renders as a multiplication."""
    assert scaled(Reference("a"), 8).render() == "a,8.000000,*"


def test_unknown_as_zero():
    """Test unknown substitution expression."""
    assert unknown_as_zero(Reference("a")).render() == "a,UN,0,a,IF"


def test_sum_of_accumulates_left_to_right():
    """Test sum renders first operand alone, then operand and + pairs."""
    expression = sum_of([Reference("a"), Reference("b"), Reference("c")])
    assert expression.render() == "a,b,+,c,+"


def test_sum_of_single_operand():
    """Test sum of one operand is the operand."""
    assert sum_of([Reference("a")]).render() == "a"


def test_sum_of_empty():
    """Test sum of nothing is rejected."""
    with pytest.raises(ValueError):
        sum_of([])


def test_average_expression():
    """Test division by a count."""
    expression = BinaryOp("/", sum_of([Reference("a"), Reference("b")]), Constant(2))
    assert expression.render() == "a,b,+,2,/"


def test_reductions():
    """Test VDEF reductions."""
    assert Reduction(Reference("s"), StatisticKind.MIN).render() == "s,MINIMUM"
    assert Reduction(Reference("s"), StatisticKind.AVG).render() == "s,AVERAGE"
    assert Reduction(Reference("s"), StatisticKind.MAX).render() == "s,MAXIMUM"
    assert Reduction(Reference("s"), StatisticKind.LAST).render() == "s,LAST"
    assert PercentileOf(Reference("s"), 99.9).render() == "s,99.900000,PERCENT"


def test_program_render():
    """Test statement rendering and export listing."""
    program = Program()
    program.add(Define("s-orig0", "/rrd/host:1/cpu.rrd", "value"))
    program.add(Derive("s", Reference("s-orig0")))
    program.add(Summarize("s-min", Reduction(Reference("s"), StatisticKind.MIN)))
    program.add(Print("s-min", "web:80", "min"))
    program.add(Export("s", "s"))

    assert program.render() == [
        "DEF:s-orig0=/rrd/host\\:1/cpu.rrd:value:AVERAGE",
        "CDEF:s=s-orig0",
        "VDEF:s-min=s,MINIMUM",
        "PRINT:s-min:web\\:80,min,%lf",
        "XPORT:s:s",
    ]
    assert program.exports() == ["s"]
    assert not program.is_empty()
    assert Program().is_empty()


def test_print_doubles_percent_in_label():
    """Test percent signs in labels are not read as format directives."""
    assert Print("serie0-min", "disk 95%", "min").render() == "PRINT:serie0-min:disk 95%%,min,%lf"
    assert Print("serie0-max", "load:100%", "max").render() == "PRINT:serie0-max:load\\:100%%,max,%lf"
