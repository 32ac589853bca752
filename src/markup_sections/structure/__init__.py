"""Heading recognition, section tree construction, numbering and TOC."""

from markup_sections.structure.context import IdRegistry, ParseContext
from markup_sections.structure.headings import HeadingEvent, HeadingMatch, HeadingRecognizer
from markup_sections.structure.ids import IdAllocator
from markup_sections.structure.numbering import SectionNumberer, number_sections
from markup_sections.structure.subs import SubstitutionHook, default_substitutions
from markup_sections.structure.toc import build_toc, toc_label
from markup_sections.structure.tree import SectionTreeBuilder

__all__ = [
    "HeadingEvent",
    "HeadingMatch",
    "HeadingRecognizer",
    "IdAllocator",
    "IdRegistry",
    "ParseContext",
    "SectionNumberer",
    "SectionTreeBuilder",
    "SubstitutionHook",
    "build_toc",
    "default_substitutions",
    "number_sections",
    "toc_label",
]
