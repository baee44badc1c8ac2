"""
Directory sink factory — writes generated files under an output root.

New files are written atomically (temp file in the same directory, then
rename). Insertions need the target to exist and to contain the
``@@protoc_insertion_point(NAME)`` marker; the content goes right before
the marker line, each line indented like the marker.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from rpcgen.adapters.base import INSERTION_MARKER, BufferedSink, OutputSink, SinkFactory

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".rpcgen_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def insert_at_marker(original: str, insertion_point: str, content: str) -> str:
    """Insert ``content`` before the marker line for ``insertion_point``.

    Raises:
        KeyError: The marker is not present.
    """
    marker = INSERTION_MARKER.format(insertion_point)
    lines = original.splitlines(keepends=True)
    for i, line in enumerate(lines):
        if marker in line:
            indent = line[: len(line) - len(line.lstrip())]
            block = "".join(
                (indent + piece) if piece.strip() else piece
                for piece in content.splitlines(keepends=True)
            )
            if block and not block.endswith("\n"):
                block += "\n"
            return "".join(lines[:i]) + block + "".join(lines[i:])
    raise KeyError(f"insertion point '{insertion_point}' not found")


class _FileSink(BufferedSink):
    def __init__(self, path: Path, filename: str, insertion_point: str | None = None):
        super().__init__(filename, insertion_point)
        self._path = path

    def _commit(self, data: bytes) -> None:
        if self.insertion_point is None:
            _atomic_write(self._path, data)
            logger.debug("Wrote %s (%d bytes)", self._path, len(data))
            return
        original = self._path.read_text(encoding="utf-8")
        updated = insert_at_marker(original, self.insertion_point, data.decode("utf-8"))
        _atomic_write(self._path, updated.encode("utf-8"))
        logger.debug("Inserted %d bytes into %s at %s", len(data), self._path, self.insertion_point)


class DirectorySinkFactory(SinkFactory):
    """Writes output files relative to ``root``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def name(self) -> str:
        return "directory"

    def _resolve(self, filename: str) -> Path:
        root = self.root.resolve()
        path = (root / filename).resolve()
        if root != path and root not in path.parents:
            raise PermissionError(f"{filename} escapes output directory {root}")
        return path

    def open(self, filename: str) -> OutputSink:
        return _FileSink(self._resolve(filename), filename)

    def open_for_insert(self, filename: str, insertion_point: str) -> OutputSink:
        path = self._resolve(filename)
        if not path.is_file():
            raise FileNotFoundError(f"Cannot insert into missing file: {filename}")
        marker = INSERTION_MARKER.format(insertion_point)
        if marker not in path.read_text(encoding="utf-8"):
            raise LookupError(f"No insertion point '{insertion_point}' in {filename}")
        return _FileSink(path, filename, insertion_point)
