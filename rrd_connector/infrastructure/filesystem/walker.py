"""File tree walker."""

import os
from collections.abc import Iterator

from rrd_connector.domain.entities import WalkEntry
from rrd_connector.domain.ports import FileTreeWalkerPort


class OsFileTreeWalker(FileTreeWalkerPort):
    """Depth-first walker over the local filesystem.

    Entries are visited in name order. Symbolic links to directories are
    reported but not followed. Errors listing a directory propagate.
    """

    def walk(self, root: str) -> Iterator[WalkEntry]:
        """Yield every entry under root."""
        yield from self._walk_dir(root)

    def _walk_dir(self, directory: str) -> Iterator[WalkEntry]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                yield WalkEntry(path=entry.path, is_regular_file=False)
                yield from self._walk_dir(entry.path)
            else:
                yield WalkEntry(path=entry.path, is_regular_file=entry.is_file())
