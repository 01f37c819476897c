"""Ports (interfaces) for infrastructure adapters."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from rrd_connector.domain.entities import WalkEntry
from rrd_connector.domain.program import Program
from rrd_connector.domain.types import ExportTable, StatLines, Step, Timestamp


class FileTreeWalkerPort(ABC):
    """Port for walking the archive directory tree."""

    @abstractmethod
    def walk(self, root: str) -> Iterator[WalkEntry]:
        """Yield every entry under root once. Raises OSError on traversal failure."""


class TimeSeriesEnginePort(ABC):
    """Port for the time-series execution engine."""

    @abstractmethod
    async def dataset_names(self, archive_path: str) -> list[str]:
        """List dataset names stored in an archive file."""

    @abstractmethod
    async def export(
        self,
        program: Program,
        start: Timestamp,
        end: Timestamp,
        step: Step,
    ) -> ExportTable:
        """Run an export program and return one column per exported identifier."""

    @abstractmethod
    async def graph_info(
        self,
        program: Program,
        start: Timestamp,
        end: Timestamp,
    ) -> StatLines:
        """Run a graph program and return its printed lines."""
