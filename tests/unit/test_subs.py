"""Tests for the default title substitutions and per-parse context."""

import pytest

from markup_sections.structure.context import ParseContext, next_letter
from markup_sections.structure.subs import (
    apply_replacements,
    default_substitutions,
    substitute_attributes,
)


class TestAttributeReferences:
    def test_document_attribute(self):
        assert substitute_attributes("About {product}", {"product": "Widget"}) == "About Widget"

    def test_case_insensitive_name(self):
        assert substitute_attributes("{Product}", {"product": "Widget"}) == "Widget"

    def test_intrinsic_attribute(self):
        assert substitute_attributes("a{sp}b{amp}c", {}) == "a b&c"

    def test_document_attribute_overrides_intrinsic(self):
        assert substitute_attributes("{sp}", {"sp": "_"}) == "_"

    def test_unknown_reference_kept(self):
        assert substitute_attributes("{missing}", {}) == "{missing}"

    def test_escaped_reference(self):
        assert substitute_attributes(r"\{product}", {"product": "Widget"}) == "{product}"


class TestReplacements:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("(C) 2024", "© 2024"),
            ("Brand(R)", "Brand®"),
            ("Name(TM)", "Name™"),
            ("this--that", "this—that"),
            ("wait...", "wait…"),
            ("it's", "it’s"),
            ("'quoted'", "'quoted'"),
        ],
    )
    def test_replacements(self, text, expected):
        assert apply_replacements(text) == expected


class TestDefaultSubstitutions:
    def test_entities(self):
        substitute = default_substitutions()
        assert substitute("Ben &amp; Jerry &#34;Ice&#34;") == 'Ben & Jerry "Ice"'

    def test_reads_attributes_at_call_time(self):
        attributes = {}
        substitute = default_substitutions(attributes)
        attributes["product"] = "Widget"
        assert substitute("{product}") == "Widget"

    def test_plain_text_unchanged(self):
        assert default_substitutions()("Plain Title") == "Plain Title"


class TestParseContext:
    def test_ordinals_per_parent(self):
        context = ParseContext()
        a, b = object(), object()
        assert context.next_ordinal(a) == 1
        assert context.next_ordinal(a) == 2
        assert context.next_ordinal(b) == 1

    def test_appendix_letters(self):
        context = ParseContext()
        assert [context.next_appendix_letter() for _ in range(3)] == ["A", "B", "C"]

    @pytest.mark.parametrize(
        "letter, expected",
        [("A", "B"), ("Z", "AA"), ("AZ", "BA"), ("ZZ", "AAA")],
    )
    def test_next_letter(self, letter, expected):
        assert next_letter(letter) == expected

    def test_warn_records_and_logs(self, caplog):
        context = ParseContext()
        with caplog.at_level("WARNING"):
            context.warn("careful")
        assert context.warnings == ["careful"]
        assert "careful" in caplog.text
