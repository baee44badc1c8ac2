"""
Memory sink factory — test double and dry-run target.

Keeps every committed file and insertion in memory. Configurable to
fail opening specific targets.
"""

from __future__ import annotations

from rpcgen.adapters.base import BufferedSink, OutputSink, SinkFactory


class _MemorySink(BufferedSink):
    def __init__(self, factory: MemorySinkFactory, filename: str,
                 insertion_point: str | None = None):
        super().__init__(filename, insertion_point)
        self._factory = factory

    def close(self) -> None:
        if not self.closed:
            self._factory.released += 1
        super().close()

    def _commit(self, data: bytes) -> None:
        text = data.decode("utf-8")
        if self.insertion_point is None:
            self._factory.files[self.filename] = text
        else:
            self._factory.insertions.append((self.filename, self.insertion_point, text))


class MemorySinkFactory(SinkFactory):
    """Collects output in ``files`` and ``insertions``.

    ``released`` counts closed sinks, so callers can check that every
    opened sink was released.
    """

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.insertions: list[tuple[str, str, str]] = []
        self.released = 0
        self._failures: dict[str, str] = {}
        self._open_log: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    @property
    def open_log(self) -> list[str]:
        """Every filename an open was attempted for, in order."""
        return self._open_log

    def set_failure(self, filename: str, error: str = "Mock failure") -> None:
        """Make opening ``filename`` raise ``OSError``."""
        self._failures[filename] = error

    def _check(self, filename: str) -> None:
        self._open_log.append(filename)
        if filename in self._failures:
            raise OSError(self._failures[filename])

    def open(self, filename: str) -> OutputSink:
        self._check(filename)
        return _MemorySink(self, filename)

    def open_for_insert(self, filename: str, insertion_point: str) -> OutputSink:
        self._check(filename)
        return _MemorySink(self, filename, insertion_point)
