"""
Schema file model — a read-only view over one protoc file descriptor.

Views are built from ``FileDescriptorProto`` messages and copy what the
generators need. The descriptor itself is not retained, so several views
may be built from the same descriptor without any ownership concerns.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Trailing extensions stripped from schema names, longest first
SCHEMA_EXTENSIONS = (".protodevel", ".proto")


class MethodDef(BaseModel):
    """One RPC method and its streaming mode."""

    model_config = ConfigDict(frozen=True)

    name: str
    input_type: str                  # fully qualified, e.g. ".pkg.Request"
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False

    @property
    def kind(self) -> str:
        """Streaming mode: unary, client_streaming, server_streaming or bidi."""
        if self.client_streaming and self.server_streaming:
            return "bidi"
        if self.client_streaming:
            return "client_streaming"
        if self.server_streaming:
            return "server_streaming"
        return "unary"


class ServiceDef(BaseModel):
    """A named group of RPC methods."""

    model_config = ConfigDict(frozen=True)

    name: str
    methods: tuple[MethodDef, ...] = ()


class FileOptions(BaseModel):
    """File-level options the generators care about."""

    model_config = ConfigDict(frozen=True)

    cc_generic_services: bool = False


class SchemaFile(BaseModel):
    """Read-only view over one schema (.proto) file."""

    model_config = ConfigDict(frozen=True)

    name: str
    package: str = ""
    dependencies: tuple[str, ...] = ()
    services: tuple[ServiceDef, ...] = ()
    options: FileOptions = Field(default_factory=FileOptions)

    @property
    def base_name(self) -> str:
        """File name with the trailing schema extension stripped."""
        for ext in SCHEMA_EXTENSIONS:
            if self.name.endswith(ext):
                return self.name[: -len(ext)]
        return self.name

    @property
    def service_count(self) -> int:
        return len(self.services)

    @property
    def method_count(self) -> int:
        return sum(len(s.methods) for s in self.services)

    @property
    def package_parts(self) -> list[str]:
        return [p for p in self.package.split(".") if p]

    @classmethod
    def from_proto(cls, proto: Any) -> SchemaFile:
        """Build a view from a ``descriptor_pb2.FileDescriptorProto``."""
        services = tuple(
            ServiceDef(
                name=svc.name,
                methods=tuple(
                    MethodDef(
                        name=m.name,
                        input_type=m.input_type,
                        output_type=m.output_type,
                        client_streaming=m.client_streaming,
                        server_streaming=m.server_streaming,
                    )
                    for m in svc.method
                ),
            )
            for svc in proto.service
        )
        return cls(
            name=proto.name,
            package=proto.package,
            dependencies=tuple(proto.dependency),
            services=services,
            options=FileOptions(
                cc_generic_services=proto.options.cc_generic_services,
            ),
        )
