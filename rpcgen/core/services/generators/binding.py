"""
Binding generator — ``<name>.grpc.pb.h`` and ``<name>.grpc.pb.cc``.

Declares, per service, the client ``Stub`` and the server ``Service``
base class, and defines the method name table and client calls.
"""

from __future__ import annotations

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile, ServiceDef
from rpcgen.core.services.generators import cpp_common as cc
from rpcgen.core.services.generators.registry import ArtifactKind, Role


# ── Header ──────────────────────────────────────────────────────


def header_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    guard = cc.guard_symbol(schema.name, "")
    return f"{cc.banner(schema)}#ifndef {guard}\n#define {guard}\n\n"


def header_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = cc.local_include(cc.message_header(schema, options)) + "\n"
    out += "#include <functional>\n#include <memory>\n"
    for header in (
        "grpcpp/client_context.h",
        "grpcpp/completion_queue.h",
        "grpcpp/impl/rpc_method.h",
        "grpcpp/server_context.h",
        "grpcpp/support/status.h",
        "grpcpp/support/sync_stream.h",
        "grpcpp/channel.h",
        "grpcpp/impl/service_type.h",
    ):
        out += cc.system_include(header, options)
    out += cc.extra_includes(schema, options)
    return out + "\n"


def _service_declaration(schema: SchemaFile, service: ServiceDef) -> str:
    out = f"class {service.name} final {{\n public:\n"
    out += "  static constexpr char const* service_full_name() {\n"
    out += f'    return "{cc.full_service_name(schema, service)}";\n  }}\n'

    out += "  class StubInterface {\n   public:\n    virtual ~StubInterface() {}\n"
    for method in service.methods:
        ret, params = cc.client_signature(method)
        out += f"    virtual {ret} {method.name}({params}) = 0;\n"
    out += "  };\n"

    out += "  class Stub final : public StubInterface {\n   public:\n"
    out += "    Stub(const std::shared_ptr< ::grpc::ChannelInterface>& channel);\n"
    for method in service.methods:
        ret, params = cc.client_signature(method)
        out += f"    {ret} {method.name}({params}) override;\n"
    out += "\n   private:\n    std::shared_ptr< ::grpc::ChannelInterface> channel_;\n"
    for method in service.methods:
        out += f"    const ::grpc::internal::RpcMethod rpcmethod_{method.name}_;\n"
    out += "  };\n"
    out += "  static std::unique_ptr<Stub> NewStub(const std::shared_ptr< ::grpc::ChannelInterface>& channel);\n\n"

    out += "  class Service : public ::grpc::Service {\n   public:\n"
    out += "    Service();\n    virtual ~Service();\n"
    for method in service.methods:
        out += f"    virtual ::grpc::Status {method.name}({cc.server_signature(method)});\n"
    out += "  };\n};\n\n"
    return out


def header_services(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options) + "\n"
    for service in schema.services:
        out += _service_declaration(schema, service)
    return out + cc.close_namespaces(schema, options) + "\n"


def header_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return f"#endif  // {cc.guard_symbol(schema.name, '')}\n"


# ── Source ──────────────────────────────────────────────────────


def source_prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return cc.banner(schema) + "\n"


def source_includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = cc.local_include(cc.message_header(schema, options))
    out += cc.local_include(schema.base_name + ".grpc.pb.h") + "\n"
    for header in (
        "grpcpp/impl/channel_interface.h",
        "grpcpp/impl/client_unary_call.h",
        "grpcpp/impl/rpc_service_method.h",
        "grpcpp/support/method_handler.h",
        "grpcpp/support/sync_stream.h",
    ):
        out += cc.system_include(header, options)
    return out + "\n"


_RPC_TYPES = {
    "unary": "NORMAL_RPC",
    "client_streaming": "CLIENT_STREAMING",
    "server_streaming": "SERVER_STREAMING",
    "bidi": "BIDI_STREAMING",
}


def _service_definition(schema: SchemaFile, service: ServiceDef) -> str:
    name = service.name
    out = f"static const char* {name}_method_names[] = {{\n"
    for method in service.methods:
        out += f'  "{cc.method_path(schema, service, method)}",\n'
    out += "};\n\n"

    out += f"std::unique_ptr< {name}::Stub> {name}::NewStub(const std::shared_ptr< ::grpc::ChannelInterface>& channel) {{\n"
    out += f"  std::unique_ptr< {name}::Stub> stub(new {name}::Stub(channel));\n  return stub;\n}}\n\n"

    out += f"{name}::Stub::Stub(const std::shared_ptr< ::grpc::ChannelInterface>& channel)\n"
    out += "  : channel_(channel)"
    for i, method in enumerate(service.methods):
        out += (
            f", rpcmethod_{method.name}_({name}_method_names[{i}], "
            f"::grpc::internal::RpcMethod::{_RPC_TYPES[method.kind]}, channel)"
        )
    out += "\n  {}\n\n"

    for method in service.methods:
        ret, params = cc.client_signature(method)
        out += f"{ret} {name}::Stub::{method.name}({params}) {{\n"
        req, resp = cc.cpp_type(method.input_type), cc.cpp_type(method.output_type)
        kind = method.kind
        if kind == "unary":
            out += (
                f"  return ::grpc::internal::BlockingUnaryCall< {req}, {resp}>"
                f"(channel_.get(), rpcmethod_{method.name}_, context, request, response);\n"
            )
        elif kind == "client_streaming":
            out += (
                f"  return std::unique_ptr< ::grpc::ClientWriter< {req}>>(::grpc::internal::ClientWriterFactory< {req}>"
                f"::Create(channel_.get(), rpcmethod_{method.name}_, context, response));\n"
            )
        elif kind == "server_streaming":
            out += (
                f"  return std::unique_ptr< ::grpc::ClientReader< {resp}>>(::grpc::internal::ClientReaderFactory< {resp}>"
                f"::Create(channel_.get(), rpcmethod_{method.name}_, context, request));\n"
            )
        else:
            out += (
                f"  return std::unique_ptr< ::grpc::ClientReaderWriter< {req}, {resp}>>("
                f"::grpc::internal::ClientReaderWriterFactory< {req}, {resp}>"
                f"::Create(channel_.get(), rpcmethod_{method.name}_, context));\n"
            )
        out += "}\n\n"

    out += f"{name}::Service::Service() {{\n}}\n\n{name}::Service::~Service() {{\n}}\n\n"
    for method in service.methods:
        out += f"::grpc::Status {name}::Service::{method.name}({cc.server_signature(method)}) {{\n"
        out += '  return ::grpc::Status(::grpc::StatusCode::UNIMPLEMENTED, "");\n}\n\n'
    return out


def source_services(schema: SchemaFile, options: GeneratorOptions) -> str:
    if not schema.services:
        return ""
    out = cc.open_namespaces(schema, options) + "\n"
    for service in schema.services:
        out += _service_definition(schema, service)
    return out + cc.close_namespaces(schema, options)


def source_epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return ""


RENDERERS = {
    (ArtifactKind.HEADER, Role.PROLOGUE): header_prologue,
    (ArtifactKind.HEADER, Role.INCLUDES): header_includes,
    (ArtifactKind.HEADER, Role.SERVICES): header_services,
    (ArtifactKind.HEADER, Role.EPILOGUE): header_epilogue,
    (ArtifactKind.SOURCE, Role.PROLOGUE): source_prologue,
    (ArtifactKind.SOURCE, Role.INCLUDES): source_includes,
    (ArtifactKind.SOURCE, Role.SERVICES): source_services,
    (ArtifactKind.SOURCE, Role.EPILOGUE): source_epilogue,
}
