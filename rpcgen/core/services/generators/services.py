"""
Services generator — batch ``services.h`` and ``services.cc``.

Produces one ``Services`` class owning a stub implementation of every
service in the compilation unit, plus a ``Register`` method that adds
them all to a ``ServerBuilder``. Framing fragments come from the first
schema file; the rest are rendered once per file.
"""

from __future__ import annotations

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators import cpp_common as cc
from rpcgen.core.services.generators.registry import ArtifactKind, Role

SERVICES_GUARD = "GRPC_SERVICES_H__INCLUDED"


def _open_services_ns(options: GeneratorOptions) -> str:
    if not options.services_namespace:
        return ""
    return f"namespace {options.services_namespace} {{\n\n"


def _close_services_ns(options: GeneratorOptions) -> str:
    if not options.services_namespace:
        return ""
    return f"}}  // namespace {options.services_namespace}\n"


def _stub_type(schema: SchemaFile, service_name: str, options: GeneratorOptions) -> str:
    return f"{cc.qualified_namespace(schema, options)}::{service_name}Stub"


# ── services.h ──────────────────────────────────────────────────


def header_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = f"{cc.GENERATED_BANNER}\n#ifndef {SERVICES_GUARD}\n#define {SERVICES_GUARD}\n\n"
    out += "#include <memory>\n\n"
    out += "namespace grpc {\nclass ServerBuilder;\n}  // namespace grpc\n\n"
    return out


def header_forward_declarations(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options)
    for service in schema.services:
        out += f"class {service.name}Stub;\n"
    return out + cc.close_namespaces(schema, options) + "\n"


def header_pointer_declarations(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = ""
    for service in schema.services:
        alias = cc.member_name(schema, service).rstrip("_")
        out += f"using {alias}_ptr = std::unique_ptr<{_stub_type(schema, service.name, options)}>;\n"
    return out


def header_class_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = "\n" + _open_services_ns(options)
    out += "class Services final {\n public:\n"
    out += "  Services();\n  ~Services();\n\n"
    out += "  void Register(::grpc::ServerBuilder* builder);\n\n private:\n"
    return out


def header_class_declaration(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = ""
    for service in schema.services:
        member = cc.member_name(schema, service)
        out += f"  ::{member.rstrip('_')}_ptr {member};\n"
    return out


def header_class_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "};\n\n" + _close_services_ns(options)


def header_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return f"\n#endif  // {SERVICES_GUARD}\n"


# ── services.cc ─────────────────────────────────────────────────


def source_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = f"{cc.GENERATED_BANNER}\n"
    out += cc.local_include("services.h")
    out += cc.system_include("grpcpp/server_builder.h", options)
    return out + "\n"


def source_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    return cc.local_include(schema.base_name + ".stub.h")


def source_constructor_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "\n" + _open_services_ns(options) + "Services::Services() {\n"


def source_constructor_declaration(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = ""
    for service in schema.services:
        out += (
            f"  {cc.member_name(schema, service)} = "
            f"std::make_unique<{_stub_type(schema, service.name, options)}>();\n"
        )
    return out


def source_constructor_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "}\n\n"


def source_destructor(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "Services::~Services() = default;\n\n"


def source_method_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "void Services::Register(::grpc::ServerBuilder* builder) {\n"


def source_method_call(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = ""
    for service in schema.services:
        out += f"  builder->RegisterService({cc.member_name(schema, service)}.get());\n"
    return out


def source_method_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = "}\n"
    if options.services_namespace:
        out += "\n" + _close_services_ns(options)
    return out


RENDERERS = {
    (ArtifactKind.SERVICES_HEADER, Role.PROLOGUE): header_prologue,
    (ArtifactKind.SERVICES_HEADER, Role.FORWARD_DECLARATIONS): header_forward_declarations,
    (ArtifactKind.SERVICES_HEADER, Role.POINTER_DECLARATIONS): header_pointer_declarations,
    (ArtifactKind.SERVICES_HEADER, Role.CLASS_PROLOGUE): header_class_prologue,
    (ArtifactKind.SERVICES_HEADER, Role.CLASS_DECLARATION): header_class_declaration,
    (ArtifactKind.SERVICES_HEADER, Role.CLASS_EPILOGUE): header_class_epilogue,
    (ArtifactKind.SERVICES_HEADER, Role.EPILOGUE): header_epilogue,
    (ArtifactKind.SERVICES_SOURCE, Role.PROLOGUE): source_prologue,
    (ArtifactKind.SERVICES_SOURCE, Role.INCLUDES): source_includes,
    (ArtifactKind.SERVICES_SOURCE, Role.CONSTRUCTOR_PROLOGUE): source_constructor_prologue,
    (ArtifactKind.SERVICES_SOURCE, Role.CONSTRUCTOR_DECLARATION): source_constructor_declaration,
    (ArtifactKind.SERVICES_SOURCE, Role.CONSTRUCTOR_EPILOGUE): source_constructor_epilogue,
    (ArtifactKind.SERVICES_SOURCE, Role.DESTRUCTOR): source_destructor,
    (ArtifactKind.SERVICES_SOURCE, Role.METHOD_PROLOGUE): source_method_prologue,
    (ArtifactKind.SERVICES_SOURCE, Role.METHOD_CALL): source_method_call,
    (ArtifactKind.SERVICES_SOURCE, Role.METHOD_EPILOGUE): source_method_epilogue,
}
