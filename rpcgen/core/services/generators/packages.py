"""
Package manifest generator — batch ``packages.xml``.

Lists every schema file of the compilation unit, then every service
and method with its streaming mode.
"""

from __future__ import annotations

from xml.sax.saxutils import quoteattr

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.generators import cpp_common as cc
from rpcgen.core.services.generators.registry import ArtifactKind, Role


def prologue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return '<?xml version="1.0" encoding="UTF-8"?>\n<packages>\n'


def includes(schema: SchemaFile, options: GeneratorOptions) -> str:
    return (
        f"  <include file={quoteattr(schema.name)} "
        f"package={quoteattr(schema.package)} "
        f"header={quoteattr(schema.base_name + '.grpc.pb.h')}/>\n"
    )


def methods(schema: SchemaFile, options: GeneratorOptions) -> str:
    out = ""
    for service in schema.services:
        out += (
            f"  <service name={quoteattr(cc.full_service_name(schema, service))} "
            f"file={quoteattr(schema.name)}>\n"
        )
        for method in service.methods:
            out += (
                f"    <method name={quoteattr(method.name)} "
                f"path={quoteattr(cc.method_path(schema, service, method))} "
                f"input={quoteattr(method.input_type)} "
                f"output={quoteattr(method.output_type)} "
                f"kind={quoteattr(method.kind)}/>\n"
            )
        out += "  </service>\n"
    return out


def epilogue(schema: SchemaFile, options: GeneratorOptions) -> str:
    return "</packages>\n"


RENDERERS = {
    (ArtifactKind.PACKAGES_XML, Role.PROLOGUE): prologue,
    (ArtifactKind.PACKAGES_XML, Role.INCLUDES): includes,
    (ArtifactKind.PACKAGES_XML, Role.METHODS): methods,
    (ArtifactKind.PACKAGES_XML, Role.EPILOGUE): epilogue,
}
