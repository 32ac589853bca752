"""Section tree builder.

Consumes heading events and opaque content blocks in document order and
nests them with a stack of open sections:

- On a heading, pop until the top of the stack has a strictly lower
  level, then attach the new section under it.
- Floating titles attach as leaves and are never pushed, so following
  content keeps flowing into the enclosing section.
- Content always attaches to the current top of the stack.
"""

from __future__ import annotations

import logging
from typing import Optional

from markup_sections.config import Config
from markup_sections.exceptions import StructureError
from markup_sections.model.schema import (
    ContentBlock,
    Section,
    SectionName,
    resolve_sectname,
)
from markup_sections.structure.context import ParseContext
from markup_sections.structure.headings import HeadingEvent
from markup_sections.structure.ids import IdAllocator
from markup_sections.structure.subs import SubstitutionHook

logger = logging.getLogger(__name__)


class SectionTreeBuilder:
    """Assembles the section tree beneath a document root."""

    def __init__(
        self,
        config: Config,
        context: ParseContext,
        substitute: Optional[SubstitutionHook] = None,
    ):
        self.config = config
        self.context = context
        self.substitute = substitute or (lambda text: text)
        self.ids = IdAllocator(config.sections, context.ids, self.substitute)
        self.root = Section(level=0, sectname=SectionName.DOCUMENT)
        self._stack: list[Section] = [self.root]
        self._started = False

    @property
    def started(self) -> bool:
        """Whether any heading or content has been added."""
        return self._started

    @property
    def current(self) -> Section:
        """Innermost open section."""
        return self._stack[-1]

    def add_heading(self, event: HeadingEvent) -> Section:
        """Attach a section for ``event`` and return it (the root for a title)."""
        sectname = resolve_sectname(event.style, event.level, self.config.doctype)
        if sectname == SectionName.FLOATING_TITLE:
            # Leaf under the innermost open section; nothing is closed or opened
            self._started = True
            return self._attach(self.current, event, sectname)

        if event.level == 0:
            return self._set_title(event)

        self._started = True
        while self._stack[-1].level >= event.level:
            self._stack.pop()
        parent = self._stack[-1]

        if event.level > parent.level + 1:
            self.context.warn(
                f"Section level {event.level} '{event.raw_title}' is out of sequence: "
                f"expected level {parent.level + 1}"
            )

        section = self._attach(parent, event, sectname)
        self._stack.append(section)
        return section

    def add_content(self, block: ContentBlock) -> ContentBlock:
        """Attach body content to the innermost open section."""
        self._started = True
        return self.current.append(block)

    def finish(self) -> Section:
        """Return the root of the finished tree."""
        self._stack = [self.root]
        return self.root

    def _set_title(self, event: HeadingEvent) -> Section:
        if self.started:
            raise StructureError(
                f"Document title '{event.raw_title}' must be the first block of the document"
            )
        self._started = True
        self.root.title = self.substitute(event.raw_title)
        if event.explicit_id:
            self.context.ids.register(event.explicit_id, explicit=True)
        self.root.id = event.explicit_id
        self.root.reftext = event.reftext
        return self.root

    def _attach(self, parent: Section, event: HeadingEvent, sectname: SectionName) -> Section:
        section = Section(
            level=event.level,
            id=self.ids.allocate(event.raw_title, event.explicit_id),
            title=self.substitute(event.raw_title),
            sectname=sectname,
            style=event.style,
            role=event.role,
            reftext=event.reftext,
        )
        parent.append(section)
        logger.debug(
            "Section level=%d id=%s sectname=%s", section.level, section.id, sectname.value
        )
        return section
