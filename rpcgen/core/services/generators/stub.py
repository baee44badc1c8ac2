"""
Stub generator — ``<name>.stub.h`` and ``<name>.stub.cc``.

One ``<Service>Stub`` per service: a concrete server implementation that
overrides every handler and answers UNIMPLEMENTED until filled in.
"""

from __future__ import annotations

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators import cpp_common as cc
from rpcgen.core.services.generators.registry import ArtifactKind, Role


def header_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    guard = cc.guard_symbol(schema.name, "STUB_")
    return f"{cc.banner(schema)}#ifndef {guard}\n#define {guard}\n\n"


def header_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    return cc.local_include(schema.base_name + ".grpc.pb.h") + "\n"


def header_services(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options) + "\n"
    for service in schema.services:
        out += f"class {service.name}Stub final : public {service.name}::Service {{\n public:\n"
        out += f"  {service.name}Stub();\n  ~{service.name}Stub() override;\n"
        for method in service.methods:
            out += f"  ::grpc::Status {method.name}({cc.server_signature(method)}) override;\n"
        out += "};\n\n"
    return out + cc.close_namespaces(schema, options) + "\n"


def header_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return f"#endif  // {cc.guard_symbol(schema.name, 'STUB_')}\n"


def source_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return cc.banner(schema) + "\n"


def source_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    return cc.local_include(schema.base_name + ".stub.h") + "\n"


def source_services(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options) + "\n"
    for service in schema.services:
        name = f"{service.name}Stub"
        out += f"{name}::{name}() {{}}\n\n{name}::~{name}() {{}}\n\n"
        for method in service.methods:
            out += f"::grpc::Status {name}::{method.name}({cc.server_signature(method)}) {{\n"
            out += '  return ::grpc::Status(::grpc::StatusCode::UNIMPLEMENTED, "");\n}\n\n'
    return out + cc.close_namespaces(schema, options)


def source_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return ""


RENDERERS = {
    (ArtifactKind.STUB_HEADER, Role.PROLOGUE): header_prologue,
    (ArtifactKind.STUB_HEADER, Role.INCLUDES): header_includes,
    (ArtifactKind.STUB_HEADER, Role.SERVICES): header_services,
    (ArtifactKind.STUB_HEADER, Role.EPILOGUE): header_epilogue,
    (ArtifactKind.STUB_SOURCE, Role.PROLOGUE): source_prologue,
    (ArtifactKind.STUB_SOURCE, Role.INCLUDES): source_includes,
    (ArtifactKind.STUB_SOURCE, Role.SERVICES): source_services,
    (ArtifactKind.STUB_SOURCE, Role.EPILOGUE): source_epilogue,
}
