"""Time-series engine backed by the rrdtool Python binding."""

import asyncio
import re

import pandas as pd
import rrdtool
import structlog

from rrd_connector.domain.errors import EngineError
from rrd_connector.domain.ports import TimeSeriesEnginePort
from rrd_connector.domain.program import Program
from rrd_connector.domain.types import ExportTable, StatLines, Step, Timestamp

logger = structlog.get_logger()

_DS_INDEX_KEY = re.compile(r"^ds\[(?P<name>.+)\]\.index$")
_PRINT_KEY = re.compile(r"^print\[(?P<index>\d+)\]$")

_RRDTOOL_ERRORS = (rrdtool.OperationalError, rrdtool.ProgrammingError)


class RRDToolEngine(TimeSeriesEnginePort):
    """rrdtool engine, optionally going through rrdcached."""

    def __init__(self, daemon: str | None = None) -> None:
        """Initialize engine."""
        self.daemon = daemon

    async def dataset_names(self, archive_path: str) -> list[str]:
        """List dataset names from archive info, in dataset index order."""
        try:
            info = await asyncio.to_thread(rrdtool.info, archive_path)
        except _RRDTOOL_ERRORS as e:
            raise EngineError(f"Failed to read archive info {archive_path}: {e}") from e

        indexed = []
        for key, value in info.items():
            match = _DS_INDEX_KEY.match(key)
            if match:
                indexed.append((value, match.group("name")))

        return [name for _, name in sorted(indexed)]

    async def export(
        self,
        program: Program,
        start: Timestamp,
        end: Timestamp,
        step: Step,
    ) -> ExportTable:
        """Run rrdtool xport and return a float64 frame, NaN for unknowns."""
        args = [
            *self._window_args(start, end),
            "--step",
            str(int(step.total_seconds())),
            *self._daemon_args(),
            *program.render(),
        ]

        try:
            result = await asyncio.to_thread(rrdtool.xport, *args)
        except _RRDTOOL_ERRORS as e:
            raise EngineError(f"Failed to export plots: {e}") from e

        try:
            meta = result["meta"]
            frame = pd.DataFrame.from_records(result["data"], columns=meta["legend"]).astype("float64")
            frame.index = pd.to_datetime(
                [meta["start"] + i * meta["step"] for i in range(len(frame))],
                unit="s",
                utc=True,
            )
        finally:
            result.clear()

        logger.debug("xport_completed", rows=len(frame), columns=list(frame.columns))
        return frame

    async def graph_info(
        self,
        program: Program,
        start: Timestamp,
        end: Timestamp,
    ) -> StatLines:
        """Run rrdtool graphv and return its PRINT lines in order."""
        args = ["-", *self._window_args(start, end), *self._daemon_args(), *program.render()]

        try:
            result = await asyncio.to_thread(rrdtool.graphv, *args)
        except _RRDTOOL_ERRORS as e:
            raise EngineError(f"Failed to get graph information: {e}") from e

        try:
            printed = []
            for key, value in result.items():
                match = _PRINT_KEY.match(key)
                if match:
                    printed.append((int(match.group("index")), value))
        finally:
            # Drops the rendered image buffer
            result.clear()

        return [value for _, value in sorted(printed)]

    def _window_args(self, start: Timestamp, end: Timestamp) -> list[str]:
        return ["--start", str(int(start.timestamp())), "--end", str(int(end.timestamp()))]

    def _daemon_args(self) -> list[str]:
        if self.daemon:
            return ["--daemon", self.daemon]
        return []
