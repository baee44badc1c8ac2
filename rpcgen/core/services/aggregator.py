"""
Batch aggregation — every schema file of a compilation unit in, the
batch-scoped artifacts out.

Framing fragments (prologues, epilogues, class brackets) are rendered
from the first schema file only. Per-file passes walk all files once, in
input order, so every file's declarations land before any file's bodies.

Generic-services files are not rejected here; only per-file assembly
enforces that restriction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators.registry import (
    BATCH_ARTIFACTS,
    ArtifactKind,
    BatchLayout,
    RendererRegistry,
    Scope,
    default_registry,
)

logger = logging.getLogger(__name__)

REPORT_FILENAME = "__report__.log"


@dataclass
class BatchSummary:
    """Counts reported by the diagnostic summary."""

    file_count: int = 0
    files_with_services: int = 0
    service_count: int = 0
    method_count: int = 0
    file_names: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "file_count": self.file_count,
            "files_with_services": self.files_with_services,
            "service_count": self.service_count,
            "method_count": self.method_count,
            "file_names": self.file_names,
        }


def summarize(schemas: Sequence[SchemaFile]) -> BatchSummary:
    """Count files, services and methods across a batch."""
    return BatchSummary(
        file_count=len(schemas),
        files_with_services=sum(1 for s in schemas if s.service_count > 0),
        service_count=sum(s.service_count for s in schemas),
        method_count=sum(s.method_count for s in schemas),
        file_names=[s.name for s in schemas],
    )


def render_summary(summary: BatchSummary) -> str:
    """One fact per line, then one file name per line."""
    lines = [
        f"Proto-files found: {summary.file_count}",
        f"Proto-files with services found: {summary.files_with_services}",
        f"Services found: {summary.service_count}",
        f"Methods found: {summary.method_count}",
        *summary.file_names,
    ]
    return "\n".join(lines) + "\n"


def compose_batch(
    kind: ArtifactKind,
    layout: BatchLayout,
    schemas: Sequence[SchemaFile],
    options: GeneratorOptions,
    registry: RendererRegistry,
) -> str:
    """Walk a batch layout, rendering FIRST steps once and EACH steps per file."""
    first = schemas[0]
    parts: list[str] = []
    for role, scope in layout:
        if scope is Scope.FIRST:
            parts.append(registry.render(kind, role, first, options))
        else:
            for schema in schemas:
                parts.append(registry.render(kind, role, schema, options))
    return "".join(parts)


def aggregate_batch(
    schemas: Sequence[SchemaFile],
    options: GeneratorOptions,
    registry: RendererRegistry | None = None,
    *,
    report: bool = False,
) -> list[Artifact]:
    """Build the batch artifacts for a whole compilation unit.

    Args:
        schemas: All schema files, in compilation order. Must be non-empty.
        options: Parsed generator options.
        registry: Renderer lookup (default: built-in C++ renderers).
        report: Also produce the ``__report__.log`` summary (first).

    Returns:
        ``services.h``, ``services.cc`` and ``packages.xml``, preceded by
        the summary when ``report`` is set.

    Raises:
        ValueError: ``schemas`` is empty.
    """
    if not schemas:
        raise ValueError("Batch aggregation needs at least one schema file")

    if registry is None:
        registry = default_registry()
    artifacts: list[Artifact] = []

    if report:
        summary = summarize(schemas)
        artifacts.append(Artifact(
            filename=REPORT_FILENAME,
            content=render_summary(summary),
            reason="Batch diagnostic summary",
        ))

    for kind, filename, layout in BATCH_ARTIFACTS:
        artifacts.append(Artifact(
            filename=filename,
            content=compose_batch(kind, layout, schemas, options, registry),
            reason=f"{kind.value} for {len(schemas)} schema file(s)",
        ))

    logger.debug(
        "Aggregated %d artifacts from %d schema files (framing from %s)",
        len(artifacts), len(schemas), schemas[0].name,
    )
    return artifacts
