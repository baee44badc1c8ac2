"""
Tests for domain models — schema views, options, artifacts.
"""

import pytest
from pydantic import ValidationError

from rpcgen.core.models import (
    Artifact,
    GeneratorOptions,
    MethodDef,
    SchemaFile,
)


class TestSchemaFile:
    def test_from_proto(self, greeter_descriptor):
        schema = SchemaFile.from_proto(greeter_descriptor)
        assert schema.name == "greeter.proto"
        assert schema.package == "helloworld"
        assert [s.name for s in schema.services] == ["Greeter"]
        assert [m.name for m in schema.services[0].methods] == ["SayHello", "Chat"]
        assert schema.options.cc_generic_services is False

    def test_from_proto_generic_services(self, make_proto):
        schema = SchemaFile.from_proto(make_proto("x.proto", generic_services=True))
        assert schema.options.cc_generic_services is True

    def test_from_proto_dependencies(self, batch):
        assert batch[2].dependencies == ("alpha/a.proto",)

    def test_view_does_not_track_descriptor(self, greeter_descriptor):
        """Views copy what they need; later descriptor edits don't leak in."""
        schema = SchemaFile.from_proto(greeter_descriptor)
        greeter_descriptor.service[0].name = "Renamed"
        assert schema.services[0].name == "Greeter"

    def test_two_views_of_one_descriptor(self, greeter_descriptor):
        assert SchemaFile.from_proto(greeter_descriptor) == SchemaFile.from_proto(greeter_descriptor)

    @pytest.mark.parametrize("name, base", [
        ("greeter.proto", "greeter"),
        ("a/b/c.proto", "a/b/c"),
        ("legacy.protodevel", "legacy"),
        ("noext", "noext"),
        ("proto.proto.proto", "proto.proto"),
    ])
    def test_base_name(self, name, base):
        assert SchemaFile(name=name).base_name == base

    def test_counts(self, batch):
        assert [s.service_count for s in batch] == [2, 0, 2]
        assert [s.method_count for s in batch] == [3, 0, 2]

    def test_package_parts(self):
        assert SchemaFile(name="x.proto", package="a.b.c").package_parts == ["a", "b", "c"]
        assert SchemaFile(name="x.proto").package_parts == []

    def test_frozen(self, greeter):
        with pytest.raises(ValidationError):
            greeter.name = "other.proto"


class TestMethodDef:
    @pytest.mark.parametrize("client, server, kind", [
        (False, False, "unary"),
        (True, False, "client_streaming"),
        (False, True, "server_streaming"),
        (True, True, "bidi"),
    ])
    def test_kind(self, client, server, kind):
        m = MethodDef(name="M", input_type=".A", output_type=".B",
                      client_streaming=client, server_streaming=server)
        assert m.kind == kind


class TestGeneratorOptions:
    def test_effective_extension_default(self):
        assert GeneratorOptions().effective_message_header_extension == ".pb.h"

    def test_frozen(self):
        opts = GeneratorOptions()
        with pytest.raises(ValidationError):
            opts.generate_mock_code = True


class TestArtifact:
    def test_target_plain(self):
        assert Artifact(filename="a.h", content="").target == "a.h"

    def test_target_insertion(self):
        a = Artifact(filename="a.h", content="x", insertion_point="includes")
        assert a.target == "a.h@includes"
