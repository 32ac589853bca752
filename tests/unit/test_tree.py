"""Tests for the section tree builder."""

import pytest

from markup_sections.config import Config
from markup_sections.exceptions import StructureError
from markup_sections.model.schema import ContentBlock, SectionName
from markup_sections.structure.context import ParseContext
from markup_sections.structure.headings import HeadingEvent
from markup_sections.structure.tree import SectionTreeBuilder


def _builder(doctype: str = "article") -> SectionTreeBuilder:
    return SectionTreeBuilder(Config(doctype=doctype), ParseContext())


def _h(level: int, title: str, **kwargs) -> HeadingEvent:
    return HeadingEvent(level=level, raw_title=title, **kwargs)


# ---------------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------------

class TestNesting:
    def test_siblings_and_children(self):
        builder = _builder()
        builder.add_heading(_h(1, "A"))
        builder.add_heading(_h(2, "A.1"))
        builder.add_heading(_h(2, "A.2"))
        builder.add_heading(_h(1, "B"))
        root = builder.finish()

        assert [s.title for s in root.children] == ["A", "B"]
        assert [s.title for s in root.children[0].children] == ["A.1", "A.2"]
        assert root.children[1].children == []

    def test_pop_multiple_levels(self):
        builder = _builder()
        builder.add_heading(_h(1, "A"))
        builder.add_heading(_h(2, "A.1"))
        builder.add_heading(_h(3, "A.1.1"))
        builder.add_heading(_h(4, "A.1.1.1"))
        builder.add_heading(_h(2, "A.2"))
        root = builder.finish()

        a = root.children[0]
        assert [s.title for s in a.children] == ["A.1", "A.2"]
        assert a.children[1].parent is a

    def test_content_attaches_to_innermost(self):
        builder = _builder()
        builder.add_content(ContentBlock(lines=["preamble"]))
        builder.add_heading(_h(1, "A"))
        builder.add_content(ContentBlock(lines=["body"]))
        root = builder.finish()

        assert root.blocks[0].lines == ["preamble"]
        assert root.children[0].blocks[0].lines == ["body"]

    def test_level_skip_nests_and_warns(self):
        builder = _builder()
        builder.add_heading(_h(1, "A"))
        deep = builder.add_heading(_h(3, "Too deep"))
        root = builder.finish()

        assert deep.parent is root.children[0]
        assert len(builder.context.warnings) == 1
        assert "out of sequence" in builder.context.warnings[0]

    def test_parent_level_always_lower(self):
        builder = _builder()
        for level, title in [(1, "a"), (3, "b"), (2, "c"), (4, "d"), (1, "e"), (2, "f")]:
            builder.add_heading(_h(level, title))
        root = builder.finish()
        for section in root.walk():
            assert section.parent.level < section.level


# ---------------------------------------------------------------------------
# Document title
# ---------------------------------------------------------------------------

class TestDocumentTitle:
    def test_title_sets_root(self):
        builder = _builder()
        root_section = builder.add_heading(_h(0, "Guide", explicit_id="top"))
        assert root_section is builder.root
        assert builder.root.title == "Guide"
        assert builder.root.id == "top"
        assert builder.root.sectname == SectionName.DOCUMENT

    def test_title_id_is_registered(self):
        builder = _builder()
        builder.add_heading(_h(0, "Guide", explicit_id="_intro"))
        section = builder.add_heading(_h(1, "Intro"))
        assert builder.context.ids.explicit == {"_intro"}
        assert section.id == "_intro_2"

    def test_title_after_content_raises(self):
        builder = _builder()
        builder.add_content(ContentBlock(lines=["text"]))
        with pytest.raises(StructureError, match="first block"):
            builder.add_heading(_h(0, "Late Title"))

    def test_started_flag(self):
        builder = _builder()
        assert builder.started is False
        builder.add_heading(_h(0, "Guide"))
        assert builder.started is True


# ---------------------------------------------------------------------------
# Floating titles and styles
# ---------------------------------------------------------------------------

class TestFloatingTitles:
    def test_floating_title_is_leaf(self):
        builder = _builder()
        builder.add_heading(_h(1, "A"))
        floating = builder.add_heading(_h(1, "Aside", style="discrete"))
        builder.add_content(ContentBlock(lines=["still in A"]))
        root = builder.finish()

        a = root.children[0]
        assert floating.parent is a
        assert floating.sectname == SectionName.FLOATING_TITLE
        assert a.blocks[1].lines == ["still in A"]
        assert len(root.children) == 1

    def test_floating_title_gets_id(self):
        builder = _builder()
        floating = builder.add_heading(_h(2, "Aside", style="float"))
        assert floating.id == "_aside"

    def test_floating_level_zero(self):
        builder = _builder()
        builder.add_content(ContentBlock(lines=["text"]))
        floating = builder.add_heading(_h(0, "Big", style="float"))
        assert floating.level == 0
        assert floating.parent is builder.root
        assert builder.root.title == ""


class TestStyles:
    def test_special_section(self):
        builder = _builder()
        section = builder.add_heading(_h(1, "Terms", style="glossary", role="small"))
        assert section.sectname == SectionName.GLOSSARY
        assert section.style == "glossary"
        assert section.role == "small"

    def test_book_chapter(self):
        builder = _builder("book")
        chapter = builder.add_heading(_h(1, "Chapter"))
        section = builder.add_heading(_h(2, "Section"))
        assert chapter.sectname == SectionName.CHAPTER
        assert section.sectname == SectionName.SECTION

    def test_title_substitution(self):
        builder = SectionTreeBuilder(Config(), ParseContext(), lambda text: text.upper())
        section = builder.add_heading(_h(1, "Loud"))
        assert section.title == "LOUD"
        assert section.id == "_loud"
