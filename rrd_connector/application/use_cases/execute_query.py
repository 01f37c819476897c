"""Execute compiled query programs on the time-series engine."""

from dataclasses import dataclass, field

import structlog

from rrd_connector.application.services.query_compiler import CompiledQuery
from rrd_connector.domain.errors import EngineError
from rrd_connector.domain.ports import TimeSeriesEnginePort
from rrd_connector.domain.types import ExportTable, StatLines, Step, Timestamp

logger = structlog.get_logger()


@dataclass
class RawQueryResult:
    """Raw engine output for one query."""

    table: ExportTable | None = None
    stat_lines: StatLines = field(default_factory=list)

    def release(self) -> None:
        """Drop the engine output once it is merged or abandoned."""
        self.table = None
        self.stat_lines = []


async def run(
    compiled: CompiledQuery,
    engine: TimeSeriesEnginePort,
    start: Timestamp,
    end: Timestamp,
    step: Step,
    info_only: bool = False,
) -> RawQueryResult:
    """Run the export program (unless info_only) and the graph program."""
    result = RawQueryResult()

    try:
        if not info_only and not compiled.export_program.is_empty():
            result.table = await engine.export(compiled.export_program, start, end, step)

        # The graph program runs for every query, samples requested or not
        if not compiled.graph_program.is_empty():
            result.stat_lines = await engine.graph_info(compiled.graph_program, start, end)

    except EngineError as e:
        result.release()
        logger.error(
            "engine_execution_failed",
            start=start.isoformat(),
            end=end.isoformat(),
            info_only=info_only,
            error=str(e),
        )
        raise

    logger.debug(
        "engine_execution_completed",
        rows=0 if result.table is None else len(result.table),
        stat_lines=len(result.stat_lines),
    )

    return result
