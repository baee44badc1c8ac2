"""
Mock generator — ``<name>_mock.grpc.pb.h`` (gmock stubs for clients).
"""

from __future__ import annotations

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators import cpp_common as cc
from rpcgen.core.services.generators.registry import ArtifactKind, Role


def prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    guard = cc.guard_symbol(schema.name, "MOCK_")
    return f"{cc.banner(schema)}#ifndef {guard}\n#define {guard}\n\n"


def includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = cc.local_include(cc.message_header(schema, options))
    out += cc.local_include(schema.base_name + ".grpc.pb.h")
    out += cc.system_include("grpcpp/support/sync_stream.h", options)
    out += cc.system_include("gmock/gmock.h", options, search_path=options.gmock_search_path)
    return out + "\n"


def services(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options) + "\n"
    for service in schema.services:
        out += f"class Mock{service.name}Stub : public {service.name}::StubInterface {{\n public:\n"
        for method in service.methods:
            ret, params = cc.client_signature(method)
            if "," in ret:
                ret = f"({ret})"
            out += f"  MOCK_METHOD({ret}, {method.name}, ({params}), (override));\n"
        out += "};\n\n"
    return out + cc.close_namespaces(schema, options) + "\n"


def epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return f"#endif  // {cc.guard_symbol(schema.name, 'MOCK_')}\n"


RENDERERS = {
    (ArtifactKind.MOCK_HEADER, Role.PROLOGUE): prologue,
    (ArtifactKind.MOCK_HEADER, Role.INCLUDES): includes,
    (ArtifactKind.MOCK_HEADER, Role.SERVICES): services,
    (ArtifactKind.MOCK_HEADER, Role.EPILOGUE): epilogue,
}
