"""
Tests for batch aggregation — every schema file in, batch artifacts out.
"""

import xml.etree.ElementTree as ET

import pytest

from rpcgen.core.models.options import GeneratorOptions
from rpcgen.core.models.schema import SchemaFile
from rpcgen.core.services.aggregator import (
    REPORT_FILENAME,
    aggregate_batch,
    render_summary,
    summarize,
)
from rpcgen.core.services.generators.registry import RendererRegistry


def _content(artifacts, name):
    return next(a.content for a in artifacts if a.filename == name)


class TestBatchArtifacts:
    def test_three_fixed_names(self, batch):
        artifacts = aggregate_batch(batch, GeneratorOptions())
        assert [a.filename for a in artifacts] == ["services.h", "services.cc", "packages.xml"]

    def test_report_comes_first(self, batch):
        artifacts = aggregate_batch(batch, GeneratorOptions(), report=True)
        assert [a.filename for a in artifacts] == [
            REPORT_FILENAME, "services.h", "services.cc", "packages.xml",
        ]

    def test_empty_batch_rejected(self):
        with pytest.raises(ValueError):
            aggregate_batch([], GeneratorOptions())

    def test_injected_empty_registry_is_used(self, batch):
        with pytest.raises(KeyError, match="No renderer registered"):
            aggregate_batch(batch, GeneratorOptions(), RendererRegistry())

    def test_single_file_batch(self, greeter):
        artifacts = aggregate_batch([greeter], GeneratorOptions())
        assert len(artifacts) == 3

    def test_generic_services_not_checked(self, make_proto, greeter):
        """Only the per-file path rejects generic services; batch includes the file."""
        legacy = SchemaFile.from_proto(
            make_proto("legacy.proto", "legacy", {"Old": ["Call"]}, generic_services=True)
        )
        artifacts = aggregate_batch([greeter, legacy], GeneratorOptions())
        assert 'file="legacy.proto"' in _content(artifacts, "packages.xml")

    def test_idempotent(self, batch):
        first = aggregate_batch(batch, GeneratorOptions(), report=True)
        second = aggregate_batch(batch, GeneratorOptions(), report=True)
        assert first == second


class TestSummary:
    def test_counts(self, batch):
        summary = summarize(batch)
        assert summary.file_count == 3
        assert summary.files_with_services == 2
        assert summary.service_count == 4
        assert summary.method_count == 5
        assert summary.file_names == ["alpha/a.proto", "beta/b.proto", "gamma/c.proto"]

    def test_report_lines(self, batch):
        artifacts = aggregate_batch(batch, GeneratorOptions(), report=True)
        assert artifacts[0].content.splitlines() == [
            "Proto-files found: 3",
            "Proto-files with services found: 2",
            "Services found: 4",
            "Methods found: 5",
            "alpha/a.proto",
            "beta/b.proto",
            "gamma/c.proto",
        ]

    def test_render_ends_with_newline(self, batch):
        assert render_summary(summarize(batch)).endswith("gamma/c.proto\n")


class TestLayout:
    def test_framing_from_first_file_only(self, batch, recorder):
        header = _content(aggregate_batch(batch, GeneratorOptions(), recorder), "services.h")
        assert header.startswith("<services_header/prologue/alpha/a.proto>")
        assert header.endswith("<services_header/epilogue/alpha/a.proto>")
        assert "prologue/beta" not in header
        assert "epilogue/gamma" not in header

    def test_services_header_sequence(self, batch, recorder):
        header = _content(aggregate_batch(batch, GeneratorOptions(), recorder), "services.h")
        files = ["alpha/a.proto", "beta/b.proto", "gamma/c.proto"]
        expected = "<services_header/prologue/alpha/a.proto>"
        expected += "".join(f"<services_header/forward_declarations/{f}>" for f in files)
        expected += "".join(f"<services_header/pointer_declarations/{f}>" for f in files)
        expected += "<services_header/class_prologue/alpha/a.proto>"
        expected += "".join(f"<services_header/class_declaration/{f}>" for f in files)
        expected += "<services_header/class_epilogue/alpha/a.proto>"
        expected += "<services_header/epilogue/alpha/a.proto>"
        assert header == expected

    def test_packages_declarations_before_bodies(self, batch, recorder):
        xml = _content(aggregate_batch(batch, GeneratorOptions(), recorder), "packages.xml")
        last_include = xml.rindex("/includes/")
        first_method = xml.index("/methods/")
        assert last_include < first_method

    def test_declarations_before_bodies_any_order(self, batch, recorder):
        """Reversing the input reverses each pass but keeps passes apart."""
        reordered = list(reversed(batch))
        source = _content(aggregate_batch(reordered, GeneratorOptions(), recorder), "services.cc")
        assert source.rindex("/includes/") < source.index("/constructor_declaration/")
        assert source.rindex("/constructor_declaration/") < source.index("/method_call/")
        assert source.index("includes/gamma/c.proto") < source.index("includes/alpha/a.proto")
        assert source.startswith("<services_source/prologue/gamma/c.proto>")


class TestDefaultRenderers:
    def test_services_header(self, batch):
        header = _content(aggregate_batch(batch, GeneratorOptions()), "services.h")
        assert "#ifndef GRPC_SERVICES_H__INCLUDED" in header
        assert header.index("class OneStub;") < header.index("class Services final")
        assert header.index("class FourStub;") < header.index("class Services final")
        assert "::alpha_one_ptr alpha_one_;" in header
        assert "::gamma_four_ptr gamma_four_;" in header

    def test_services_source(self, batch):
        source = _content(aggregate_batch(batch, GeneratorOptions()), "services.cc")
        assert '#include "alpha/a.stub.h"' in source
        assert '#include "beta/b.stub.h"' not in source
        assert "alpha_one_ = std::make_unique<::alpha::OneStub>();" in source
        assert "builder->RegisterService(gamma_three_.get());" in source

    def test_services_namespace(self, batch):
        opts = GeneratorOptions(services_namespace="impl")
        artifacts = aggregate_batch(batch, opts)
        assert "namespace impl {" in _content(artifacts, "services.h")
        assert "std::make_unique<::alpha::impl::OneStub>()" in _content(artifacts, "services.cc")

    def test_packages_xml_is_well_formed(self, batch):
        xml = _content(aggregate_batch(batch, GeneratorOptions()), "packages.xml")
        root = ET.fromstring(xml)
        assert root.tag == "packages"
        assert [e.get("file") for e in root.findall("include")] == [
            "alpha/a.proto", "beta/b.proto", "gamma/c.proto",
        ]
        methods = root.findall("service/method")
        assert len(methods) == 5
        assert methods[0].get("path") == "/alpha.One/Get"
        assert methods[0].get("kind") == "unary"
