"""Table of contents projection of a numbered section tree."""

from __future__ import annotations

from typing import Optional

from markup_sections.config import TocConfig
from markup_sections.model.schema import Section, Toc, TocEntry


def toc_label(section: Section) -> str:
    """Entry text: number, caption or bare title, in that order of preference."""
    if section.numbered:
        return f"{section.sectnum()} {section.title}"
    if section.caption:
        return f"{section.caption}{section.title}"
    return section.title


def build_toc(root: Section, config: Optional[TocConfig] = None) -> Toc:
    """Build the outline of every non-floating section beneath ``root``.

    Args:
        root: Document root (or any section whose subtree is wanted).
        config: TOC settings; ``levels`` limits the section depth included.
    """
    config = config or TocConfig()

    def entries(parent: Section) -> list[TocEntry]:
        result: list[TocEntry] = []
        for section in parent.children:
            if section.is_floating:
                continue
            if config.levels is not None and section.level > config.levels:
                continue
            result.append(
                TocEntry(
                    id=section.id,
                    label=toc_label(section),
                    title=section.title,
                    level=section.level,
                    sectname=section.sectname,
                    children=entries(section),
                )
            )
        return result

    return Toc(title=config.title, entries=entries(root))
