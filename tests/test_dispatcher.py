"""
Tests for output dispatch and the sink adapters.
"""

from pathlib import Path

import pytest
from google.protobuf.compiler import plugin_pb2

from rpcgen.adapters.base import BufferedSink, OutputSink, SinkFactory
from rpcgen.adapters.filesystem import DirectorySinkFactory, insert_at_marker
from rpcgen.adapters.memory import MemorySinkFactory
from rpcgen.adapters.protoc import ResponseSinkFactory
from rpcgen.core.models.artifact import Artifact
from rpcgen.core.models.errors import OutputWriteFailed
from rpcgen.core.services.dispatcher import OutputDispatcher


def _artifacts(*names):
    return [Artifact(filename=n, content=f"// {n}\n") for n in names]


class _ExplodingSink(BufferedSink):
    committed: list = []

    def write(self, data: bytes) -> None:
        raise OSError("disk full")

    def _commit(self, data: bytes) -> None:
        self.committed.append(data)


class _ExplodingFactory(SinkFactory):
    def __init__(self):
        self.sinks: list[_ExplodingSink] = []

    @property
    def name(self) -> str:
        return "exploding"

    def open(self, filename: str) -> OutputSink:
        sink = _ExplodingSink(filename)
        self.sinks.append(sink)
        return sink

    def open_for_insert(self, filename: str, insertion_point: str) -> OutputSink:
        return self.open(filename)


class TestWrite:
    def test_writes_content_verbatim(self):
        factory = MemorySinkFactory()
        OutputDispatcher(factory).write(Artifact(filename="a.h", content="ä\n  x"))
        assert factory.files == {"a.h": "ä\n  x"}

    def test_insertion_point_artifact(self):
        factory = MemorySinkFactory()
        OutputDispatcher(factory).write(
            Artifact(filename="a.h", content="int x;\n", insertion_point="includes")
        )
        assert factory.files == {}
        assert factory.insertions == [("a.h", "includes", "int x;\n")]

    def test_write_at_insertion_point(self):
        factory = MemorySinkFactory()
        OutputDispatcher(factory).write_at_insertion_point("a.h", "scope", "y")
        assert factory.insertions == [("a.h", "scope", "y")]

    def test_open_failure_names_file(self):
        factory = MemorySinkFactory()
        factory.set_failure("a.h", "read-only")
        with pytest.raises(OutputWriteFailed) as exc:
            OutputDispatcher(factory).write(_artifacts("a.h")[0])
        assert exc.value.filename == "a.h"
        assert "a.h" in str(exc.value)
        assert "read-only" in str(exc.value)

    def test_sink_released(self):
        factory = MemorySinkFactory()
        OutputDispatcher(factory).write(_artifacts("a.h")[0])
        assert factory.released == 1

    def test_write_error_releases_and_discards(self):
        """A failing write still closes the sink, and nothing is committed."""
        _ExplodingSink.committed = []
        factory = _ExplodingFactory()
        with pytest.raises(OutputWriteFailed):
            OutputDispatcher(factory).write(_artifacts("a.h")[0])
        assert factory.sinks[0].closed
        assert _ExplodingSink.committed == []


class TestDispatch:
    def test_all_written_in_order(self):
        factory = MemorySinkFactory()
        report = OutputDispatcher(factory).dispatch(_artifacts("a.h", "b.h", "c.h"))
        assert report.ok
        assert report.written == ["a.h", "b.h", "c.h"]
        assert list(factory.files) == ["a.h", "b.h", "c.h"]

    def test_failure_does_not_block_later_writes(self):
        factory = MemorySinkFactory()
        factory.set_failure("b.h")
        report = OutputDispatcher(factory).dispatch(_artifacts("a.h", "b.h", "c.h"))
        assert not report.ok
        assert report.written == ["a.h", "c.h"]
        assert [f.filename for f in report.failures] == ["b.h"]
        assert factory.open_log == ["a.h", "b.h", "c.h"]

    def test_to_dict(self):
        factory = MemorySinkFactory()
        factory.set_failure("b.h", "nope")
        data = OutputDispatcher(factory).dispatch(_artifacts("a.h", "b.h")).to_dict()
        assert data["written"] == ["a.h"]
        assert data["failed"][0]["file"] == "b.h"


class TestResponseSinkFactory:
    def test_files_added_to_response(self):
        factory = ResponseSinkFactory()
        OutputDispatcher(factory).dispatch(_artifacts("a.h", "b.cc"))
        assert [f.name for f in factory.response.file] == ["a.h", "b.cc"]
        assert factory.response.file[0].content == "// a.h\n"
        assert not factory.response.file[0].HasField("insertion_point")

    def test_insertion_point_recorded(self):
        response = plugin_pb2.CodeGeneratorResponse()
        OutputDispatcher(ResponseSinkFactory(response)).write_at_insertion_point(
            "a.pb.h", "namespace_scope", "int x;\n"
        )
        assert response.file[0].insertion_point == "namespace_scope"

    def test_same_file_twice_fails(self):
        factory = ResponseSinkFactory()
        report = OutputDispatcher(factory).dispatch(_artifacts("a.h", "a.h"))
        assert report.written == ["a.h"]
        assert "same file twice" in str(report.failures[0])
        assert len(factory.response.file) == 1

    def test_aborted_write_can_be_retried(self):
        factory = ResponseSinkFactory()
        sink = factory.open("a.h")
        sink.write(b"partial")
        sink.abort()
        sink.close()
        assert len(factory.response.file) == 0

        OutputDispatcher(factory).write(Artifact(filename="a.h", content="// a.h\n"))
        assert [f.name for f in factory.response.file] == ["a.h"]
        with pytest.raises(FileExistsError):
            factory.open("a.h")


class TestDirectorySinkFactory:
    def test_writes_nested_files(self, tmp_path: Path):
        OutputDispatcher(DirectorySinkFactory(tmp_path)).write(
            Artifact(filename="pkg/a.grpc.pb.h", content="// a\n")
        )
        assert (tmp_path / "pkg" / "a.grpc.pb.h").read_text() == "// a\n"
        assert not list((tmp_path / "pkg").glob(".rpcgen_*"))

    def test_overwrites_existing(self, tmp_path: Path):
        (tmp_path / "a.h").write_text("old")
        OutputDispatcher(DirectorySinkFactory(tmp_path)).write(Artifact(filename="a.h", content="new"))
        assert (tmp_path / "a.h").read_text() == "new"

    def test_rejects_escape(self, tmp_path: Path):
        with pytest.raises(OutputWriteFailed):
            OutputDispatcher(DirectorySinkFactory(tmp_path / "out")).write(
                Artifact(filename="../evil.h", content="")
            )

    def test_insert_before_marker_with_indent(self, tmp_path: Path):
        target = tmp_path / "a.h"
        target.write_text("class A {\n  // @@protoc_insertion_point(class_scope)\n};\n")
        OutputDispatcher(DirectorySinkFactory(tmp_path)).write_at_insertion_point(
            "a.h", "class_scope", "int x;\nint y;\n"
        )
        assert target.read_text() == (
            "class A {\n  int x;\n  int y;\n  // @@protoc_insertion_point(class_scope)\n};\n"
        )

    def test_insert_missing_file(self, tmp_path: Path):
        with pytest.raises(OutputWriteFailed) as exc:
            OutputDispatcher(DirectorySinkFactory(tmp_path)).write_at_insertion_point(
                "missing.h", "x", "y"
            )
        assert exc.value.filename == "missing.h"

    def test_insert_missing_marker(self, tmp_path: Path):
        (tmp_path / "a.h").write_text("nothing here\n")
        with pytest.raises(OutputWriteFailed):
            OutputDispatcher(DirectorySinkFactory(tmp_path)).write_at_insertion_point(
                "a.h", "includes", "y"
            )
        assert (tmp_path / "a.h").read_text() == "nothing here\n"


class TestInsertAtMarker:
    def test_blank_lines_not_indented(self):
        out = insert_at_marker("    // @@protoc_insertion_point(p)\n", "p", "a\n\nb")
        assert out == "    a\n\n    b\n    // @@protoc_insertion_point(p)\n"

    def test_unknown_marker(self):
        with pytest.raises(KeyError):
            insert_at_marker("text\n", "p", "a")
