"""Resolved document structure models."""

from markup_sections.model.report import SectionSummary, StructureReport
from markup_sections.model.schema import (
    STYLE_TRAITS,
    Block,
    ContentBlock,
    Document,
    Section,
    SectionName,
    StyleTraits,
    Toc,
    TocEntry,
    resolve_sectname,
)

__all__ = [
    "STYLE_TRAITS",
    "Block",
    "ContentBlock",
    "Document",
    "Section",
    "SectionName",
    "SectionSummary",
    "StructureReport",
    "StyleTraits",
    "Toc",
    "TocEntry",
    "resolve_sectname",
]
