"""
protoc plugin entry point (``protoc-gen-rpcgen``).

Usage:
    protoc --plugin=protoc-gen-rpcgen --rpcgen_out=gen \\
        --rpcgen_opt=generate_mock_code=true greeter.proto

Reads a CodeGeneratorRequest from stdin, runs the batch path once and the
per-file path for every file to generate, and writes the
CodeGeneratorResponse to stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO

from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from rpcgen.adapters.protoc import ResponseSinkFactory, schemas_from_request
from rpcgen.core.config.loader import report_enabled
from rpcgen.core.observability.logging_config import setup_from_env
from rpcgen.core.use_cases.generate import run_generate

logger = logging.getLogger(__name__)


def generate_code(
    request: plugin_pb2.CodeGeneratorRequest,
    *,
    report: bool = False,
) -> plugin_pb2.CodeGeneratorResponse:
    """Run the generator over a request and return the populated response."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    schemas, to_generate = schemas_from_request(request)
    result = run_generate(
        schemas,
        request.parameter,
        ResponseSinkFactory(response),
        mode="all",
        files_to_generate=to_generate,
        report=report,
    )

    if not result.ok:
        # protoc discards the files of a response that carries an error
        response.error = "\n".join(result.messages)
        logger.error("%s", response.error)
    return response


def run(stdin: BinaryIO, stdout: BinaryIO) -> int:
    """Read a request from ``stdin``, write the response to ``stdout``."""
    request = plugin_pb2.CodeGeneratorRequest()
    try:
        request.ParseFromString(stdin.read())
    except DecodeError as e:
        response = plugin_pb2.CodeGeneratorResponse()
        response.error = f"Invalid CodeGeneratorRequest: {e}"
        logger.error("%s", response.error)
    else:
        response = generate_code(request, report=report_enabled())
    stdout.write(response.SerializeToString())
    stdout.flush()
    return 0


def main() -> None:
    """Execute the protoc plugin workflow."""
    setup_from_env()
    sys.exit(run(sys.stdin.buffer, sys.stdout.buffer))


if __name__ == "__main__":
    main()
