"""
Shared C++ rendering helpers — includes, guards, namespaces, type names.
"""

from __future__ import annotations

import re

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import MethodDef, SchemaFile, ServiceDef

GENERATED_BANNER = "// Generated by the rpcgen C++ plugin.\n// If you make any local change, they will be lost.\n"


def banner(schema: SchemaFile) -> str:
    return f"{GENERATED_BANNER}// source: {schema.name}\n"


def guard_symbol(name: str, suffix: str) -> str:
    """Include guard symbol for a file name, e.g. ``GRPC_greeter_2eproto__INCLUDED``."""
    escaped = re.sub(r"[^A-Za-z0-9]", lambda m: "_" + format(ord(m.group()), "x"), name)
    return f"GRPC_{suffix}{escaped}__INCLUDED"


def system_include(header: str, options: GeneratorOptions, search_path: str | None = None) -> str:
    """Include for a library header, honouring ``use_system_headers``."""
    if options.use_system_headers:
        return f"#include <{header}>\n"
    prefix = options.grpc_search_path if search_path is None else search_path
    if prefix and not prefix.endswith("/"):
        prefix += "/"
    return f'#include "{prefix}{header}"\n'


def local_include(header: str) -> str:
    return f'#include "{header}"\n'


def message_header(schema: SchemaFile, options: GeneratorOptions) -> str:
    return schema.base_name + options.effective_message_header_extension


def strip_schema_ext(name: str) -> str:
    return SchemaFile(name=name).base_name


def extra_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    """Additional headers and, when asked, message headers of imports."""
    out = ""
    for header in options.additional_header_includes:
        out += local_include(header)
    if options.include_import_headers:
        ext = options.effective_message_header_extension
        for dep in schema.dependencies:
            out += local_include(strip_schema_ext(dep) + ext)
    return out


def namespaces(schema: SchemaFile, options: GeneratorOptions) -> list[str]:
    parts = schema.package_parts
    if options.services_namespace:
        parts = parts + [options.services_namespace]
    return parts


def open_namespaces(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "".join(f"namespace {ns} {{\n" for ns in namespaces(schema, options))


def close_namespaces(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "".join(
        f"}}  // namespace {ns}\n" for ns in reversed(namespaces(schema, options))
    )


def qualified_namespace(schema: SchemaFile, options: GeneratorOptions) -> str:
    parts = namespaces(schema, options)
    return "::" + "::".join(parts) if parts else ""


def cpp_type(type_name: str) -> str:
    """``.pkg.sub.Msg`` → ``::pkg::sub::Msg``."""
    return "::" + "::".join(p for p in type_name.split(".") if p)


def full_service_name(schema: SchemaFile, service: ServiceDef) -> str:
    return f"{schema.package}.{service.name}" if schema.package else service.name


def method_path(schema: SchemaFile, service: ServiceDef, method: MethodDef) -> str:
    return f"/{full_service_name(schema, service)}/{method.name}"


def member_name(schema: SchemaFile, service: ServiceDef) -> str:
    return "_".join(schema.package_parts + [service.name]).lower() + "_"


def server_signature(method: MethodDef) -> str:
    """Parameter list of the server-side handler for a method."""
    req, resp = cpp_type(method.input_type), cpp_type(method.output_type)
    ctx = "::grpc::ServerContext* context"
    kind = method.kind
    if kind == "unary":
        return f"{ctx}, const {req}* request, {resp}* response"
    if kind == "client_streaming":
        return f"{ctx}, ::grpc::ServerReader< {req}>* reader, {resp}* response"
    if kind == "server_streaming":
        return f"{ctx}, const {req}* request, ::grpc::ServerWriter< {resp}>* writer"
    return f"{ctx}, ::grpc::ServerReaderWriter< {resp}, {req}>* stream"


def client_signature(method: MethodDef) -> tuple[str, str]:
    """(return type, parameter list) of the blocking client call."""
    req, resp = cpp_type(method.input_type), cpp_type(method.output_type)
    ctx = "::grpc::ClientContext* context"
    kind = method.kind
    if kind == "unary":
        return "::grpc::Status", f"{ctx}, const {req}& request, {resp}* response"
    if kind == "client_streaming":
        return f"std::unique_ptr< ::grpc::ClientWriter< {req}>>", f"{ctx}, {resp}* response"
    if kind == "server_streaming":
        return f"std::unique_ptr< ::grpc::ClientReader< {resp}>>", f"{ctx}, const {req}& request"
    return f"std::unique_ptr< ::grpc::ClientReaderWriter< {req}, {resp}>>", ctx
