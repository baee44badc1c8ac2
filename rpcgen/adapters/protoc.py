"""
protoc adapter — CodeGeneratorRequest in, CodeGeneratorResponse out.

``ResponseSinkFactory`` turns every committed sink into a
``CodeGeneratorResponse.File``. The loaders build ``SchemaFile`` views
from a request or from a serialized ``FileDescriptorSet``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from rpcgen.adapters.base import BufferedSink, OutputSink, SinkFactory
from rpcgen.core.models.schema import SchemaFile

logger = logging.getLogger(__name__)


class _ResponseSink(BufferedSink):
    def __init__(self, factory: ResponseSinkFactory, filename: str,
                 insertion_point: str | None = None):
        super().__init__(filename, insertion_point)
        self._factory = factory

    def _commit(self, data: bytes) -> None:
        if self.insertion_point is None:
            self._factory._claim(self.filename)
        out = self._factory.response.file.add()
        out.name = self.filename
        if self.insertion_point is not None:
            out.insertion_point = self.insertion_point
        out.content = data.decode("utf-8")


class ResponseSinkFactory(SinkFactory):
    """Appends output files to a protoc response.

    A new file may only be opened once per response; protoc rejects
    responses that write the same file twice. A name is claimed when its
    sink commits, so an aborted write can be retried.
    """

    def __init__(self, response: plugin_pb2.CodeGeneratorResponse | None = None):
        self.response = response if response is not None else plugin_pb2.CodeGeneratorResponse()
        self._opened: set[str] = set()

    @property
    def name(self) -> str:
        return "protoc"

    def _claim(self, filename: str) -> None:
        if filename in self._opened:
            raise FileExistsError(f"Tried to write the same file twice: {filename}")
        self._opened.add(filename)

    def open(self, filename: str) -> OutputSink:
        if filename in self._opened:
            raise FileExistsError(f"Tried to write the same file twice: {filename}")
        return _ResponseSink(self, filename)

    def open_for_insert(self, filename: str, insertion_point: str) -> OutputSink:
        return _ResponseSink(self, filename, insertion_point)


# ── Loaders ─────────────────────────────────────────────────────


def schemas_from_request(
    request: plugin_pb2.CodeGeneratorRequest,
) -> tuple[list[SchemaFile], list[str]]:
    """Build views for every proto file in a request.

    Returns:
        (all schema files in request order, names of files to generate)
    """
    schemas = [SchemaFile.from_proto(proto) for proto in request.proto_file]
    to_generate = list(request.file_to_generate)
    logger.debug("Request carries %d proto files, %d to generate",
                 len(schemas), len(to_generate))
    return schemas, to_generate


def load_descriptor_set(path: Path) -> list[SchemaFile]:
    """Read a binary ``FileDescriptorSet`` (``protoc --descriptor_set_out``).

    Raises:
        OSError: The file cannot be read.
        ValueError: The content is not a valid descriptor set.
    """
    data = Path(path).read_bytes()
    fds = descriptor_pb2.FileDescriptorSet()
    try:
        fds.ParseFromString(data)
    except DecodeError as e:
        raise ValueError(f"Invalid descriptor set {path}: {e}") from e
    logger.info("Loaded %d file descriptors from %s", len(fds.file), path)
    return [SchemaFile.from_proto(proto) for proto in fds.file]
