"""
Sink base — the contract between the output dispatcher and the host.

The dispatcher never touches files or protobuf messages directly. It asks
a ``SinkFactory`` for a sink, writes bytes into it, and closes it. What
"closing" means (appending to a protoc response, renaming a temp file
into place) is up to the factory.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod

# Marker protoc and the directory sink look for when inserting
INSERTION_MARKER = "@@protoc_insertion_point({})"


class OutputSink(ABC):
    """A writable handle for one output target."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Append raw bytes."""

    @abstractmethod
    def abort(self) -> None:
        """Discard everything written; a later ``close`` commits nothing."""

    @abstractmethod
    def close(self) -> None:
        """Release the sink. Must be safe to call more than once."""


class BufferedSink(OutputSink):
    """Sink that buffers in memory and commits once, on close.

    Subclasses implement ``_commit``.
    """

    def __init__(self, filename: str, insertion_point: str | None = None):
        self.filename = filename
        self.insertion_point = insertion_point
        self._buffer = io.BytesIO()
        self._aborted = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes) -> None:
        if self._closed:
            raise ValueError(f"Sink for {self.filename} is already closed")
        self._buffer.write(data)

    def abort(self) -> None:
        self._aborted = True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if not self._aborted:
                self._commit(self._buffer.getvalue())
        finally:
            self._buffer.close()

    @abstractmethod
    def _commit(self, data: bytes) -> None:
        """Deliver the buffered content to its destination."""


class SinkFactory(ABC):
    """Opens sinks for new files and for insertion points.

    To create a new factory:
        1. Subclass SinkFactory
        2. Implement name, open, open_for_insert
        3. Raise OSError (or a subclass) when a target cannot be opened
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The factory identifier (e.g., 'protoc', 'directory')."""

    @abstractmethod
    def open(self, filename: str) -> OutputSink:
        """Open a sink that creates ``filename``."""

    @abstractmethod
    def open_for_insert(self, filename: str, insertion_point: str) -> OutputSink:
        """Open a sink that inserts at ``insertion_point`` inside ``filename``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
