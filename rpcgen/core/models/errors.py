"""
Generator errors.

Each error carries the message that is handed back to the host
(protoc's ``CodeGeneratorResponse.error`` or the CLI).
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generation failures."""


class UnknownParameter(GeneratorError):
    """A parameter entry used an unrecognized key."""

    def __init__(self, entry: str) -> None:
        self.entry = entry
        super().__init__(f"Unknown parameter: {entry}")


class InvalidParameterValue(GeneratorError):
    """A boolean parameter was given something other than true/false."""

    def __init__(self, entry: str) -> None:
        self.entry = entry
        super().__init__(f"Invalid parameter: {entry}")


class UnsupportedServiceMode(GeneratorError):
    """The schema file asks for generic services."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"{filename}: cpp grpc proto compiler plugin does not work with "
            "generic services. To generate cpp grpc APIs, please set "
            '"cc_generic_services = false".'
        )


class OutputWriteFailed(GeneratorError):
    """A sink for the target file could not be opened or written."""

    def __init__(self, filename: str, detail: str = "") -> None:
        self.filename = filename
        self.detail = detail
        msg = f"Failed to write output file: {filename}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
