"""
Output dispatch — the only place generated text leaves the process.

Every write opens a sink through the host's factory, writes the content
as UTF-8 bytes, and releases the sink on every exit path. Writes are
independent: a failed artifact does not stop the ones after it.
"""

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass, field
from typing import Iterable

from rpcgen.adapters.base import OutputSink, SinkFactory
from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.errors import OutputWriteFailed

logger = logging.getLogger(__name__)

# Errors a sink factory or sink may raise for an unwritable target
_SINK_ERRORS = (OSError, LookupError, ValueError)


@dataclass
class DispatchReport:
    """Outcome of dispatching a batch of artifacts."""

    written: list[str] = field(default_factory=list)
    failures: list[OutputWriteFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "written": self.written,
            "failed": [{"file": f.filename, "error": str(f)} for f in self.failures],
        }


class OutputDispatcher:
    """Writes artifacts through a host-provided ``SinkFactory``."""

    def __init__(self, factory: SinkFactory):
        self.factory = factory

    def write(self, artifact: Artifact) -> None:
        """Write one artifact (new file or insertion point).

        Raises:
            OutputWriteFailed: The sink could not be opened, written or committed.
        """
        if artifact.insertion_point is not None:
            self.write_at_insertion_point(
                artifact.filename, artifact.insertion_point, artifact.content,
            )
            return
        try:
            sink = self.factory.open(artifact.filename)
        except _SINK_ERRORS as e:
            raise OutputWriteFailed(artifact.filename, str(e)) from e
        self._write_sink(sink, artifact.filename, artifact.content)

    def write_at_insertion_point(self, filename: str, insertion_point: str, content: str) -> None:
        """Write ``content`` at a named insertion point inside an existing file.

        Raises:
            OutputWriteFailed: The sink could not be opened, written or committed.
        """
        try:
            sink = self.factory.open_for_insert(filename, insertion_point)
        except _SINK_ERRORS as e:
            raise OutputWriteFailed(filename, str(e)) from e
        self._write_sink(sink, filename, content)

    def _write_sink(self, sink: OutputSink, filename: str, content: str) -> None:
        try:
            with closing(sink):
                try:
                    sink.write(content.encode("utf-8"))
                except BaseException:
                    sink.abort()
                    raise
        except _SINK_ERRORS as e:
            raise OutputWriteFailed(filename, str(e)) from e
        logger.debug("Dispatched %s via %s", filename, self.factory.name)

    def dispatch(self, artifacts: Iterable[Artifact]) -> DispatchReport:
        """Write every artifact, collecting failures instead of stopping."""
        report = DispatchReport()
        for artifact in artifacts:
            try:
                self.write(artifact)
            except OutputWriteFailed as e:
                logger.error("%s", e)
                report.failures.append(e)
            else:
                logger.debug("Wrote %s: %s", artifact.target, artifact.reason or "no reason given")
                report.written.append(artifact.target)
        return report
