"""
Renderer registry — maps (artifact kind, section role) to a renderer.

A renderer is a pure function ``(SchemaFile, GeneratorOptions) -> str``.
The assembler and aggregator never call renderers by name; they walk the
fixed layouts declared here and look each step up in a registry.
"""

from __future__ import annotations

import enum
from typing import Callable, Iterable, Mapping

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile

Renderer = Callable[[SchemaFile, GeneratorOptions], str]


class ArtifactKind(str, enum.Enum):
    STUB_HEADER = "stub_header"
    STUB_SOURCE = "stub_source"
    HEADER = "header"
    SOURCE = "source"
    MOCK_HEADER = "mock_header"
    SERVICES_HEADER = "services_header"
    SERVICES_SOURCE = "services_source"
    PACKAGES_XML = "packages_xml"


class Role(str, enum.Enum):
    PROLOGUE = "prologue"
    INCLUDES = "includes"
    SERVICES = "services"
    EPILOGUE = "epilogue"
    # batch-only roles
    FORWARD_DECLARATIONS = "forward_declarations"
    POINTER_DECLARATIONS = "pointer_declarations"
    CLASS_PROLOGUE = "class_prologue"
    CLASS_DECLARATION = "class_declaration"
    CLASS_EPILOGUE = "class_epilogue"
    CONSTRUCTOR_PROLOGUE = "constructor_prologue"
    CONSTRUCTOR_DECLARATION = "constructor_declaration"
    CONSTRUCTOR_EPILOGUE = "constructor_epilogue"
    DESTRUCTOR = "destructor"
    METHOD_PROLOGUE = "method_prologue"
    METHOD_CALL = "method_call"
    METHOD_EPILOGUE = "method_epilogue"
    METHODS = "methods"


class Scope(str, enum.Enum):
    """Which schema files a batch step renders."""

    FIRST = "first"   # batch framing, from the first file only
    EACH = "each"     # one fragment per file, in input order


# ── Layouts ─────────────────────────────────────────────────────

# Per-file artifacts: every kind uses the same four roles.
FILE_ROLES: tuple[Role, ...] = (
    Role.PROLOGUE,
    Role.INCLUDES,
    Role.SERVICES,
    Role.EPILOGUE,
)

# (kind, filename suffix), in output order.
FILE_ARTIFACTS: tuple[tuple[ArtifactKind, str], ...] = (
    (ArtifactKind.STUB_HEADER, ".stub.h"),
    (ArtifactKind.STUB_SOURCE, ".stub.cc"),
    (ArtifactKind.HEADER, ".grpc.pb.h"),
    (ArtifactKind.SOURCE, ".grpc.pb.cc"),
)

MOCK_ARTIFACT: tuple[ArtifactKind, str] = (ArtifactKind.MOCK_HEADER, "_mock.grpc.pb.h")

BatchLayout = tuple[tuple[Role, Scope], ...]

# Every EACH pass that declares comes before every EACH pass that
# references those declarations.
BATCH_ARTIFACTS: tuple[tuple[ArtifactKind, str, BatchLayout], ...] = (
    (
        ArtifactKind.SERVICES_HEADER,
        "services.h",
        (
            (Role.PROLOGUE, Scope.FIRST),
            (Role.FORWARD_DECLARATIONS, Scope.EACH),
            (Role.POINTER_DECLARATIONS, Scope.EACH),
            (Role.CLASS_PROLOGUE, Scope.FIRST),
            (Role.CLASS_DECLARATION, Scope.EACH),
            (Role.CLASS_EPILOGUE, Scope.FIRST),
            (Role.EPILOGUE, Scope.FIRST),
        ),
    ),
    (
        ArtifactKind.SERVICES_SOURCE,
        "services.cc",
        (
            (Role.PROLOGUE, Scope.FIRST),
            (Role.INCLUDES, Scope.EACH),
            (Role.CONSTRUCTOR_PROLOGUE, Scope.FIRST),
            (Role.CONSTRUCTOR_DECLARATION, Scope.EACH),
            (Role.CONSTRUCTOR_EPILOGUE, Scope.FIRST),
            (Role.DESTRUCTOR, Scope.FIRST),
            (Role.METHOD_PROLOGUE, Scope.FIRST),
            (Role.METHOD_CALL, Scope.EACH),
            (Role.METHOD_EPILOGUE, Scope.FIRST),
        ),
    ),
    (
        ArtifactKind.PACKAGES_XML,
        "packages.xml",
        (
            (Role.PROLOGUE, Scope.FIRST),
            (Role.INCLUDES, Scope.EACH),
            (Role.METHODS, Scope.EACH),
            (Role.EPILOGUE, Scope.FIRST),
        ),
    ),
)


class RendererRegistry:
    """Lookup table from (kind, role) to renderer."""

    def __init__(self, renderers: Mapping[tuple[ArtifactKind, Role], Renderer] | None = None):
        self._renderers: dict[tuple[ArtifactKind, Role], Renderer] = dict(renderers or {})

    def register(self, kind: ArtifactKind, role: Role, renderer: Renderer) -> None:
        self._renderers[(kind, role)] = renderer

    def update(self, renderers: Mapping[tuple[ArtifactKind, Role], Renderer]) -> None:
        self._renderers.update(renderers)

    def get(self, kind: ArtifactKind, role: Role) -> Renderer:
        try:
            return self._renderers[(kind, role)]
        except KeyError:
            raise KeyError(f"No renderer registered for {kind.value}/{role.value}") from None

    def render(self, kind: ArtifactKind, role: Role, schema: SchemaFile,
               options: GeneratorOptions) -> str:
        return self.get(kind, role)(schema, options)

    def missing(self, required: Iterable[tuple[ArtifactKind, Role]]) -> list[tuple[ArtifactKind, Role]]:
        """Return the (kind, role) pairs from ``required`` with no renderer."""
        return [key for key in required if key not in self._renderers]

    def __contains__(self, key: object) -> bool:
        return key in self._renderers

    def __len__(self) -> int:
        return len(self._renderers)


def required_keys(include_mock: bool = True) -> list[tuple[ArtifactKind, Role]]:
    """All (kind, role) pairs the built-in layouts walk."""
    kinds = [kind for kind, _ in FILE_ARTIFACTS]
    if include_mock:
        kinds.append(MOCK_ARTIFACT[0])
    keys = [(kind, role) for kind in kinds for role in FILE_ROLES]
    for kind, _, layout in BATCH_ARTIFACTS:
        keys.extend((kind, role) for role, _ in layout)
    return keys


def default_registry() -> RendererRegistry:
    """Registry populated with the built-in C++ renderers."""
    from rpcgen.core.services.generators import binding, mock, packages, services, stub

    registry = RendererRegistry()
    for module in (stub, binding, mock, services, packages):
        registry.update(module.RENDERERS)
    return registry
