"""
Shared test fixtures — descriptors, schema views, renderer registries.
"""

from __future__ import annotations

import pytest
from google.protobuf import descriptor_pb2

from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators.registry import RendererRegistry, required_keys


def make_file_proto(
    name: str,
    package: str = "",
    services: dict[str, list[str]] | None = None,
    *,
    dependencies: list[str] | None = None,
    generic_services: bool = False,
) -> descriptor_pb2.FileDescriptorProto:
    """Build a FileDescriptorProto with unary methods ``Req``→``Resp``."""
    proto = descriptor_pb2.FileDescriptorProto(name=name, package=package)
    proto.dependency.extend(dependencies or [])
    prefix = f".{package}" if package else ""
    for svc_name, methods in (services or {}).items():
        svc = proto.service.add(name=svc_name)
        for method in methods:
            svc.method.add(
                name=method,
                input_type=f"{prefix}.{method}Request",
                output_type=f"{prefix}.{method}Reply",
            )
    if generic_services:
        proto.options.cc_generic_services = True
    return proto


def greeter_proto() -> descriptor_pb2.FileDescriptorProto:
    proto = make_file_proto("greeter.proto", "helloworld", {"Greeter": ["SayHello"]})
    stream = proto.service[0].method.add(
        name="Chat",
        input_type=".helloworld.ChatMessage",
        output_type=".helloworld.ChatMessage",
    )
    stream.client_streaming = True
    stream.server_streaming = True
    return proto


def recording_registry() -> RendererRegistry:
    """Every renderer returns ``<kind/role/file>`` so tests can read back the order."""
    registry = RendererRegistry()
    for kind, role in required_keys():
        registry.register(
            kind, role,
            lambda schema, options, k=kind, r=role: f"<{k.value}/{r.value}/{schema.name}>",
        )
    return registry


@pytest.fixture
def greeter() -> SchemaFile:
    return SchemaFile.from_proto(greeter_proto())


@pytest.fixture
def batch_protos() -> list[descriptor_pb2.FileDescriptorProto]:
    """Three files: two with services (4 services, 5 methods), one without."""
    return [
        make_file_proto("alpha/a.proto", "alpha", {"One": ["Get", "Put"], "Two": ["Ping"]}),
        make_file_proto("beta/b.proto", "beta"),
        make_file_proto("gamma/c.proto", "gamma", {"Three": ["Run"], "Four": ["Stop"]},
                        dependencies=["alpha/a.proto"]),
    ]


@pytest.fixture
def batch(batch_protos) -> list[SchemaFile]:
    return [SchemaFile.from_proto(p) for p in batch_protos]


@pytest.fixture
def recorder() -> RendererRegistry:
    return recording_registry()


@pytest.fixture
def make_proto():
    """The ``make_file_proto`` builder, for tests that need custom files."""
    return make_file_proto


@pytest.fixture
def greeter_descriptor() -> descriptor_pb2.FileDescriptorProto:
    return greeter_proto()
