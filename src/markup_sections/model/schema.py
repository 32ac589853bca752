"""Pydantic models for the resolved document structure.

A document is a root :class:`Section` (``sectname=document``) whose ``blocks``
interleave nested sections with opaque :class:`ContentBlock` entries in
document order. Parent links are plain references held in private
attributes, so they never serialize and never take part in validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, model_validator


# ---------------------------------------------------------------------------
# Section styles
# ---------------------------------------------------------------------------


class SectionName(str, Enum):
    """Categorical style of a section."""

    SECTION = "section"
    CHAPTER = "chapter"
    APPENDIX = "appendix"
    GLOSSARY = "glossary"
    BIBLIOGRAPHY = "bibliography"
    PREFACE = "preface"
    DEDICATION = "dedication"
    COLOPHON = "colophon"
    ABSTRACT = "abstract"
    SYNOPSIS = "synopsis"
    FLOATING_TITLE = "floating_title"
    DOCUMENT = "document"


@dataclass(frozen=True)
class StyleTraits:
    """How a sectname takes part in numbering and captioning."""

    numbered: bool = False  # receives an ordinal among its siblings
    special: bool = False  # exempts the whole subtree from ordinals
    counter: Optional[str] = None  # document-wide caption counter


STYLE_TRAITS: dict[SectionName, StyleTraits] = {
    SectionName.SECTION: StyleTraits(numbered=True),
    SectionName.CHAPTER: StyleTraits(numbered=True),
    SectionName.APPENDIX: StyleTraits(special=True, counter="appendix"),
    SectionName.GLOSSARY: StyleTraits(special=True),
    SectionName.BIBLIOGRAPHY: StyleTraits(special=True),
    SectionName.PREFACE: StyleTraits(special=True),
    SectionName.DEDICATION: StyleTraits(special=True),
    SectionName.COLOPHON: StyleTraits(special=True),
    SectionName.ABSTRACT: StyleTraits(special=True),
    SectionName.SYNOPSIS: StyleTraits(special=True),
    SectionName.FLOATING_TITLE: StyleTraits(),
    SectionName.DOCUMENT: StyleTraits(),
}

FLOATING_STYLES = frozenset({"float", "discrete"})


def resolve_sectname(style: Optional[str], level: int, doctype: str = "article") -> SectionName:
    """Map a block style token to the sectname of the heading it decorates.

    ``float`` and ``discrete`` always produce a floating title. Special
    styles map to their own sectname. In a book, an unstyled level-1
    section is a chapter.
    """
    if style:
        token = style.lower()
        if token in FLOATING_STYLES:
            return SectionName.FLOATING_TITLE
        try:
            sectname = SectionName(token)
        except ValueError:
            sectname = None
        if sectname is not None and STYLE_TRAITS[sectname].special:
            return sectname
    if doctype == "book" and level == 1:
        return SectionName.CHAPTER
    return SectionName.SECTION


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


class ContentBlock(BaseModel):
    """Opaque body content (paragraph, list, delimited block...)."""

    type: Literal["content"] = "content"
    lines: list[str] = Field(default_factory=list)
    style: Optional[str] = None
    id: Optional[str] = None
    title: Optional[str] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class Section(BaseModel):
    """One heading and the content it contains."""

    type: Literal["section"] = "section"
    level: int = Field(default=1, ge=0, le=5)
    id: Optional[str] = None
    title: str = ""
    sectname: SectionName = SectionName.SECTION
    style: Optional[str] = None
    role: Optional[str] = None
    reftext: Optional[str] = None
    numbered: bool = False
    ordinal: Optional[int] = Field(default=None, ge=1)
    caption: Optional[str] = None
    blocks: list[Block] = Field(default_factory=list)

    _parent: Optional[Section] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def link_blocks(self) -> Section:
        for block in self.blocks:
            if isinstance(block, Section):
                block._parent = self
        return self

    def __eq__(self, other: object) -> bool:
        # The default comparison includes private attributes, which would
        # follow parent links back up the tree.
        if not isinstance(other, Section):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    @property
    def parent(self) -> Optional[Section]:
        return self._parent

    @property
    def children(self) -> list[Section]:
        """Nested sections (including floating titles) in document order."""
        return [block for block in self.blocks if isinstance(block, Section)]

    @property
    def is_floating(self) -> bool:
        return self.sectname == SectionName.FLOATING_TITLE

    @property
    def is_special(self) -> bool:
        return STYLE_TRAITS[self.sectname].special

    def append(self, block: Block) -> Block:
        """Attach a block as the last child of this section."""
        if isinstance(block, Section):
            block._parent = self
        self.blocks.append(block)
        return block

    def ancestors(self) -> Iterator[Section]:
        """Yield the parent chain, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def walk(self) -> Iterator[Section]:
        """Yield all descendant sections depth-first in document order."""
        for child in self.children:
            yield child
            yield from child.walk()

    def sectnum(self, delimiter: str = ".", trailing: bool = True) -> str:
        """Return the section number, e.g. ``1.2.`` for the second child of ``1.``.

        Args:
            delimiter: Separator placed between ordinals.
            trailing: Whether the delimiter also follows the last ordinal.
        """
        ordinals = [str(self.ordinal)] if self.ordinal is not None else []
        for ancestor in self.ancestors():
            if ancestor.ordinal is not None:
                ordinals.append(str(ancestor.ordinal))
        number = delimiter.join(reversed(ordinals))
        if trailing and number:
            return number + delimiter
        return number


Block = Annotated[
    Union[Section, ContentBlock],
    Field(discriminator="type"),
]

# Rebuild Section now that Block is defined (recursive reference)
Section.model_rebuild()


# ---------------------------------------------------------------------------
# Table of contents
# ---------------------------------------------------------------------------


class TocEntry(BaseModel):
    """One outline entry mirroring a section."""

    id: Optional[str] = None
    label: str
    title: str = ""
    level: int = Field(ge=0, le=5)
    sectname: SectionName = SectionName.SECTION
    children: list[TocEntry] = Field(default_factory=list)

    @property
    def href(self) -> Optional[str]:
        """Link target, or None when the entry renders as plain text."""
        return f"#{self.id}" if self.id else None


class Toc(BaseModel):
    """Nested outline of a document."""

    title: str = "Table of Contents"
    entries: list[TocEntry] = Field(default_factory=list)

    def walk(self) -> Iterator[TocEntry]:
        """Yield every entry depth-first in document order."""
        stack = list(reversed(self.entries))
        while stack:
            entry = stack.pop()
            yield entry
            stack.extend(reversed(entry.children))

    def to_text(self, indent: str = "  ") -> str:
        """Render the outline as indented plain text."""
        lines = [self.title] if self.title else []

        def emit(entries: list[TocEntry], depth: int) -> None:
            for entry in entries:
                lines.append(f"{indent * depth}{entry.label}")
                emit(entry.children, depth + 1)

        emit(self.entries, 1 if self.title else 0)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Top-level document
# ---------------------------------------------------------------------------


def _make_root() -> Section:
    return Section(level=0, sectname=SectionName.DOCUMENT)


class Document(BaseModel):
    """The resolved structure of one parsed document."""

    doctype: str = "article"
    root: Section = Field(default_factory=_make_root)
    attributes: dict[str, str] = Field(default_factory=dict)
    toc: Optional[Toc] = None
    warnings: list[str] = Field(default_factory=list)

    @property
    def title(self) -> Optional[str]:
        return self.root.title or None

    @property
    def sections(self) -> list[Section]:
        return self.root.children

    def to_json(self, **kwargs) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(indent=2, **kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> Document:
        """Deserialize from JSON string."""
        return cls.model_validate_json(json_str)
