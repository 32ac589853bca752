"""Heading recognition.

Two heading forms are understood:

- single-line: ``== Title`` (optionally closed with the same marker run,
  ``== Title ==``), where a run of N ``=`` gives level N - 1;
- underline: a title line followed by a line of one repeated character,
  ``=`` (level 0), ``-`` (1), ``~`` (2), ``^`` (3) or ``+`` (4), whose
  length is within one character of the title's.

The recognizer never decides on line shape alone: it first asks the
scanner whether the cursor sits at a position where a heading may start.
Anything it rejects is ordinary content.

A level-0 heading is the document title and is only recognized before the
first block. Later ones are content in every doctype, including ``book``:
they are never read as parts or as level-0 sections. ``[float]`` and
``[discrete]`` level-0 headings are the exception and may appear anywhere.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from markup_sections.model.schema import FLOATING_STYLES
from markup_sections.scanner.base import BlockContext, BlockMetadata

logger = logging.getLogger(__name__)

MAX_LEVEL = 4

UNDERLINE_LEVELS: dict[str, int] = {"=": 0, "-": 1, "~": 2, "^": 3, "+": 4}

_SINGLE_LINE_RE = re.compile(r"^(={1,%d})\s+(\S.*)$" % (MAX_LEVEL + 1))
_CLOSING_MARKER_RE = re.compile(r"^(.*?)\s+(=+)$")
_UNDERLINE_RE = re.compile(r"^([=\-~^+])\1+$")
_INLINE_ANCHOR_RE = re.compile(r"^(.*?)\s*\[\[([A-Za-z_:][\w:.-]*)(?:,\s*(.+?))?\]\]$")
_WORD_RE = re.compile(r"\w")

# Title lines that belong to other syntax: block titles (.Title), attribute
# lists, line comments and attribute entries
_RESERVED_LINE_RE = re.compile(r"^(?:\.|\[.*\]$|//|:!?\w[\w-]*!?:)")


@dataclass
class HeadingEvent:
    """A recognized heading occurrence."""

    level: int
    raw_title: str
    explicit_id: Optional[str] = None
    reftext: Optional[str] = None
    style: Optional[str] = None
    role: Optional[str] = None


@dataclass
class HeadingMatch:
    """A heading event plus the number of input lines it spans."""

    event: HeadingEvent
    line_count: int


class HeadingRecognizer:
    """Classifies the line(s) at the scanner cursor as a heading or not."""

    def recognize(
        self,
        context: BlockContext,
        metadata: Optional[BlockMetadata] = None,
        title_allowed: bool = False,
    ) -> Optional[HeadingMatch]:
        """Try to read a heading at the current position.

        Args:
            context: Scanner position; consulted for eligibility and lookahead.
            metadata: Block metadata collected above the candidate line.
            title_allowed: Whether a level-0 document title may still appear.

        Returns:
            A HeadingMatch, or None when the lines are ordinary content.
        """
        if not context.is_heading_eligible():
            return None
        line = context.peek_line()
        if line is None or not line.strip():
            return None
        line = line.rstrip()

        match = _match_single_line(line)
        if match is None:
            match = _match_underline(line, context.peek_line(1))
        if match is None:
            return None

        level, title, line_count = match
        floating = metadata is not None and (metadata.style or "").lower() in FLOATING_STYLES
        if level == 0 and not title_allowed and not floating:
            logger.debug("Level-0 heading %r after first block treated as content", title)
            return None

        event = HeadingEvent(level=level, raw_title=title)
        _apply_inline_anchor(event)
        if metadata is not None:
            if event.explicit_id is None and metadata.anchor_id:
                event.explicit_id = metadata.anchor_id
                event.reftext = metadata.reftext
            event.style = metadata.style
            event.role = metadata.role
        return HeadingMatch(event=event, line_count=line_count)


# ---------------------------------------------------------------------------
# Form matchers: return (level, title, line_count) or None
# ---------------------------------------------------------------------------


def _match_single_line(line: str) -> Optional[tuple[int, str, int]]:
    match = _SINGLE_LINE_RE.match(line)
    if not match:
        return None
    marker, title = match.groups()
    closing = _CLOSING_MARKER_RE.match(title)
    if closing and closing.group(2) == marker:
        title = closing.group(1)
    return len(marker) - 1, title, 1


def _match_underline(line: str, next_line: Optional[str]) -> Optional[tuple[int, str, int]]:
    if next_line is None:
        return None
    underline = next_line.rstrip()
    if not _UNDERLINE_RE.match(underline):
        return None
    if line[0].isspace() or _RESERVED_LINE_RE.match(line) or not _WORD_RE.search(line):
        return None
    if abs(len(line) - len(underline)) > 1:
        return None
    return UNDERLINE_LEVELS[underline[0]], line, 2


def _apply_inline_anchor(event: HeadingEvent) -> None:
    """Move a trailing ``[[id]]`` / ``[[id, reftext]]`` from the title to the event."""
    match = _INLINE_ANCHOR_RE.match(event.raw_title)
    if not match or not match.group(1):
        return
    event.raw_title = match.group(1)
    event.explicit_id = match.group(2)
    event.reftext = match.group(3)
