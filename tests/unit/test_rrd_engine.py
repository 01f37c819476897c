"""Unit tests for rrdtool engine adapter."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

rrdtool = pytest.importorskip("rrdtool")

from rrd_connector.domain.errors import EngineError  # noqa: E402
from rrd_connector.domain.expressions import Reference  # noqa: E402
from rrd_connector.domain.program import Define, Derive, Export, Print, Program  # noqa: E402
from rrd_connector.infrastructure.engine.rrd_engine import RRDToolEngine  # noqa: E402

START = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
END = datetime(2025, 1, 15, 10, 10, tzinfo=timezone.utc)


@pytest.fixture
def program():
    """Create simple export program."""
    program = Program()
    program.add(Define("serie0-orig0", "/rrd/host1/cpu.rrd", "value"))
    program.add(Derive("serie0", Reference("serie0-orig0")))
    program.add(Export("serie0", "serie0"))
    return program


@pytest.mark.asyncio
async def test_dataset_names_in_index_order():
    """Test dataset names come from ds[...].index keys."""
    info = {
        "filename": "/rrd/host1/load.rrd",
        "ds[shortterm].index": 0,
        "ds[longterm].index": 2,
        "ds[midterm].index": 1,
        "ds[midterm].type": "GAUGE",
        "rra[0].cf": "AVERAGE",
    }

    with patch("rrd_connector.infrastructure.engine.rrd_engine.rrdtool.info", return_value=info):
        names = await RRDToolEngine().dataset_names("/rrd/host1/load.rrd")

    assert names == ["shortterm", "midterm", "longterm"]


@pytest.mark.asyncio
async def test_dataset_names_error():
    """Test binding errors are wrapped."""
    with patch(
        "rrd_connector.infrastructure.engine.rrd_engine.rrdtool.info",
        side_effect=rrdtool.OperationalError("not an RRD file"),
    ):
        with pytest.raises(EngineError, match="not an RRD file"):
            await RRDToolEngine().dataset_names("/rrd/bad.rrd")


@pytest.mark.asyncio
async def test_export_arguments_and_frame(program):
    """Test xport arguments and unknowns converted to NaN."""
    result = {
        "meta": {"start": 1736935500, "end": 1736936100, "step": 300, "rows": 2, "columns": 1, "legend": ["serie0"]},
        "data": [(1.5,), (None,)],
    }

    with patch(
        "rrd_connector.infrastructure.engine.rrd_engine.rrdtool.xport", return_value=result
    ) as xport:
        frame = await RRDToolEngine(daemon="unix:/run/rrdcached.sock").export(
            program, START, END, timedelta(minutes=5)
        )

    assert xport.call_args[0] == (
        "--start",
        str(int(START.timestamp())),
        "--end",
        str(int(END.timestamp())),
        "--step",
        "300",
        "--daemon",
        "unix:/run/rrdcached.sock",
        "DEF:serie0-orig0=/rrd/host1/cpu.rrd:value:AVERAGE",
        "CDEF:serie0=serie0-orig0",
        "XPORT:serie0:serie0",
    )
    assert list(frame.columns) == ["serie0"]
    assert frame["serie0"].iloc[0] == 1.5
    assert frame["serie0"].isna().iloc[1]
    assert len(frame.index) == 2


@pytest.mark.asyncio
async def test_export_error(program):
    """Test xport failure is wrapped."""
    with patch(
        "rrd_connector.infrastructure.engine.rrd_engine.rrdtool.xport",
        side_effect=rrdtool.OperationalError("No such file or directory"),
    ):
        with pytest.raises(EngineError, match="No such file"):
            await RRDToolEngine().export(program, START, END, timedelta(minutes=5))


@pytest.mark.asyncio
async def test_graph_info_print_lines_in_order():
    """Test graphv PRINT lines are returned by index."""
    program = Program()
    program.add(Define("serie0", "/rrd/host1/cpu.rrd", "value"))
    program.add(Print("serie0-min", "cpu", "min"))
    result = {
        "image": b"\x89PNG",
        "print[1]": "cpu,max,3.000000",
        "print[0]": "cpu,min,1.000000",
        "print[10]": "cpu,95th,2.500000",
        "graph_width": 400,
    }

    with patch(
        "rrd_connector.infrastructure.engine.rrd_engine.rrdtool.graphv", return_value=result
    ) as graphv:
        lines = await RRDToolEngine().graph_info(program, START, END)

    assert lines == ["cpu,min,1.000000", "cpu,max,3.000000", "cpu,95th,2.500000"]
    assert graphv.call_args[0][0] == "-"
    assert "--daemon" not in graphv.call_args[0]
    assert result == {}
