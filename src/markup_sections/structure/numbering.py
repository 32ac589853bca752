"""Section numbering and special captions.

Runs once over the finished tree in document order:

- ordinary sections (and book chapters) outside any special section get
  an ordinal among their numbered siblings; ``numbered`` is switched on
  only when the document asks for section numbers;
- special sections (appendix, glossary, preface...) and everything
  beneath them get no ordinal;
- appendices get a caption from a document-wide letter counter, whether
  or not numbering is on;
- floating titles are skipped.
"""

from __future__ import annotations

import logging

from markup_sections.config import Config
from markup_sections.model.schema import STYLE_TRAITS, Section
from markup_sections.structure.context import ParseContext

logger = logging.getLogger(__name__)


class SectionNumberer:
    """Assigns ordinals, the ``numbered`` flag and captions."""

    def __init__(self, config: Config, context: ParseContext):
        self.config = config
        self.context = context

    def apply(self, root: Section) -> Section:
        self._visit(root, exempt=False)
        return root

    def _visit(self, parent: Section, exempt: bool) -> None:
        for section in parent.children:
            if section.is_floating:
                continue
            traits = STYLE_TRAITS[section.sectname]
            section_exempt = exempt or traits.special

            if traits.numbered and not section_exempt:
                section.ordinal = self.context.next_ordinal(parent)
                section.numbered = self.config.sections.numbered
            else:
                section.ordinal = None
                section.numbered = False

            if traits.counter == "appendix":
                letter = self.context.next_appendix_letter()
                section.caption = f"{self.config.sections.appendix_caption} {letter}: "
                logger.debug("Appendix %s: %s", letter, section.title)

            self._visit(section, section_exempt)


def number_sections(root: Section, config: Config | None = None, context: ParseContext | None = None) -> Section:
    """Number a finished tree with a fresh context unless one is given."""
    config = config or Config.default()
    return SectionNumberer(config, context or ParseContext()).apply(root)
