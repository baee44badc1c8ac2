"""
Per-file assembly — one schema file in, its artifacts out.

Each artifact is the concatenation of the prologue, includes, services
and epilogue fragments for its kind. Fragment text is never altered.
"""

from __future__ import annotations

import logging

from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.errors import UnsupportedServiceMode
from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators.registry import (
    FILE_ARTIFACTS,
    FILE_ROLES,
    MOCK_ARTIFACT,
    ArtifactKind,
    RendererRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)


def compose(
    kind: ArtifactKind,
    schema: SchemaFile,
    options: GeneratorOptions,
    registry: RendererRegistry,
) -> str:
    """Concatenate the four per-file fragments of one artifact kind."""
    return "".join(registry.render(kind, role, schema, options) for role in FILE_ROLES)


def _layout(options: GeneratorOptions) -> list[tuple[ArtifactKind, str]]:
    layout = list(FILE_ARTIFACTS)
    if options.generate_mock_code:
        layout.append(MOCK_ARTIFACT)
    return layout


def output_filenames(schema: SchemaFile, options: GeneratorOptions) -> list[str]:
    """Names of the files ``assemble_file`` would produce, in order."""
    return [schema.base_name + suffix for _, suffix in _layout(options)]


def assemble_file(
    schema: SchemaFile,
    options: GeneratorOptions,
    registry: RendererRegistry | None = None,
) -> list[Artifact]:
    """Build every per-file artifact for one schema file.

    Args:
        schema: The schema file to generate for.
        options: Parsed generator options.
        registry: Renderer lookup (default: built-in C++ renderers).

    Returns:
        Stub header, stub source, binding header, binding source and,
        with ``generate_mock_code``, the mock header.

    Raises:
        UnsupportedServiceMode: The file sets ``cc_generic_services``.
    """
    if schema.options.cc_generic_services:
        raise UnsupportedServiceMode(schema.name)

    if registry is None:
        registry = default_registry()

    artifacts = [
        Artifact(
            filename=schema.base_name + suffix,
            content=compose(kind, schema, options, registry),
            reason=f"{kind.value} for {schema.name}",
        )
        for kind, suffix in _layout(options)
    ]

    logger.debug("Assembled %d artifacts for %s", len(artifacts), schema.name)
    return artifacts
