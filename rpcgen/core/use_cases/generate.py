"""
Generate use case — parse, compose, then dispatch.

Everything is composed in memory before the first write. A parameter,
assembly or aggregation error therefore leaves the sink untouched; write
failures are collected per artifact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from rpcgen.adapters.base import SinkFactory
from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.config import GenerationMode
from rpcgen.core.models.errors import GeneratorError
from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.aggregator import BatchSummary, aggregate_batch, summarize
from rpcgen.core.services.assembler import assemble_file
from rpcgen.core.services.dispatcher import DispatchReport, OutputDispatcher
from rpcgen.core.services.generators.registry import RendererRegistry
from rpcgen.core.services.parameters import parse_parameters

logger = logging.getLogger(__name__)

MODES: tuple[str, ...] = ("all", "per-file", "batch")


@dataclass
class GenerateResult:
    """Result of one generation run."""

    mode: str = "all"
    options: GeneratorOptions | None = None
    artifacts: list[Artifact] = field(default_factory=list)
    summary: BatchSummary | None = None
    dispatch: DispatchReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and (self.dispatch is None or self.dispatch.ok)

    @property
    def messages(self) -> list[str]:
        """Every error message, generation first, then write failures."""
        out = [self.error] if self.error else []
        if self.dispatch:
            out.extend(str(f) for f in self.dispatch.failures)
        return out

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "mode": self.mode,
            "error": self.error,
            "artifacts": [a.target for a in self.artifacts],
            "reasons": {a.target: a.reason for a in self.artifacts},
            "summary": self.summary.to_dict() if self.summary else None,
            "dispatch": self.dispatch.to_dict() if self.dispatch else None,
        }


def select_schemas(
    schemas: Sequence[SchemaFile],
    files_to_generate: Sequence[str] | None,
) -> list[SchemaFile]:
    """Pick the schema files to generate, in ``files_to_generate`` order.

    Raises:
        GeneratorError: A requested file is not among ``schemas``.
    """
    if not files_to_generate:
        return list(schemas)
    by_name = {s.name: s for s in schemas}
    missing = [name for name in files_to_generate if name not in by_name]
    if missing:
        raise GeneratorError(f"File(s) not found in input: {', '.join(missing)}")
    return [by_name[name] for name in files_to_generate]


def build_artifacts(
    schemas: Sequence[SchemaFile],
    options: GeneratorOptions,
    *,
    mode: GenerationMode = "all",
    report: bool = False,
    registry: RendererRegistry | None = None,
) -> list[Artifact]:
    """Compose every artifact for a run, batch artifacts first.

    Raises:
        GeneratorError: No schema files, a duplicate output name, or any
            assembly error.
        ValueError: Unknown mode.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'. Valid: {', '.join(MODES)}")
    if not schemas:
        raise GeneratorError("No schema files to generate")

    artifacts: list[Artifact] = []
    if mode in ("all", "batch"):
        artifacts.extend(aggregate_batch(schemas, options, registry, report=report))
    if mode in ("all", "per-file"):
        for schema in schemas:
            artifacts.extend(assemble_file(schema, options, registry))

    seen: set[str] = set()
    for artifact in artifacts:
        if artifact.insertion_point is None and artifact.filename in seen:
            raise GeneratorError(f"Duplicate output file: {artifact.filename}")
        seen.add(artifact.filename)
    return artifacts


def run_generate(
    schemas: Sequence[SchemaFile],
    parameter: str,
    factory: SinkFactory,
    *,
    mode: GenerationMode = "all",
    files_to_generate: Sequence[str] | None = None,
    report: bool = False,
    registry: RendererRegistry | None = None,
) -> GenerateResult:
    """Run one generation request end to end.

    Args:
        schemas: Every schema file known to the host.
        parameter: Raw parameter string.
        factory: Where output goes.
        mode: ``all`` (batch then per-file), ``per-file`` or ``batch``.
        files_to_generate: Names to generate (default: all of ``schemas``).
        report: Add ``__report__.log`` to the batch output.
        registry: Renderer lookup (default: built-in C++ renderers).

    Returns:
        GenerateResult; ``error`` is set when nothing was written.
    """
    result = GenerateResult(mode=mode)

    try:
        options = parse_parameters(parameter)
        result.options = options
        targets = select_schemas(schemas, files_to_generate)
        result.summary = summarize(targets)
        artifacts = build_artifacts(
            targets, options, mode=mode, report=report, registry=registry,
        )
    except GeneratorError as e:
        logger.debug("Generation aborted before any write: %s", e)
        result.error = str(e)
        return result

    result.artifacts = artifacts
    result.dispatch = OutputDispatcher(factory).dispatch(artifacts)

    logger.info(
        "Generated %d artifact(s) for %d schema file(s) via %s (%d failed)",
        len(result.dispatch.written), len(targets), factory.name,
        len(result.dispatch.failures),
    )
    return result
