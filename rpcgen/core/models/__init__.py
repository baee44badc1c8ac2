"""
Domain models — Pydantic types for the generator.

All models are re-exported here for convenient access:

    from rpcgen.core.models import Artifact, GeneratorOptions, SchemaFile
"""

from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.errors import (
    GeneratorError,
    InvalidParameterValue,
    OutputWriteFailed,
    UnknownParameter,
    UnsupportedServiceMode,
)
from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import FileOptions, MethodDef, SchemaFile, ServiceDef

__all__ = [
    # artifact.py
    "Artifact",
    # errors.py
    "GeneratorError",
    "InvalidParameterValue",
    "OutputWriteFailed",
    "UnknownParameter",
    "UnsupportedServiceMode",
    # options.py
    "GeneratorOptions",
    # schema.py
    "FileOptions",
    "MethodDef",
    "SchemaFile",
    "ServiceDef",
]
