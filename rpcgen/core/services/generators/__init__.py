"""
Generators — render C++ fragments from schema files.

Each generator module exposes a ``RENDERERS`` mapping from
``(ArtifactKind, Role)`` to a pure ``(SchemaFile, GeneratorOptions) -> str``
function. ``registry.default_registry()`` collects them all.
"""
