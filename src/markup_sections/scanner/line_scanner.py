"""Line-oriented reference scanner.

Tracks just enough block structure to answer the heading-eligibility
question: open delimited blocks, paragraph and list-continuation state,
and the metadata lines (attribute lists, anchors, block titles) that
decorate the next block. Content lines are buffered into opaque
:class:`ContentBlock` entries and flushed at block boundaries.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from markup_sections.model.schema import ContentBlock
from markup_sections.scanner.base import BlockContext, BlockMetadata

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Line patterns
# ---------------------------------------------------------------------------

# ----, ...., ====, ****, ____, ++++, //// (4+ of one char) and the open block --
_DELIMITER_RE = re.compile(r"^(?:(-{4,}|\.{4,}|={4,}|\*{4,}|_{4,}|\+{4,}|/{4,})|--)$")

# Listing, literal, passthrough and comment blocks do not nest other blocks
_VERBATIM_CHARS = frozenset("-.+/")

_ATTRIBUTE_ENTRY_RE = re.compile(r"^:(!?)(\w[\w-]*)(!?):(?:\s+(.*))?$")
_ANCHOR_RE = re.compile(r"^\[\[([A-Za-z_:][\w:.-]*)(?:,\s*(.+?))?\]\]$")
_BLOCK_ATTRIBUTES_RE = re.compile(r"^\[(?!\[)(.*)\]$")
_BLOCK_TITLE_RE = re.compile(r"^\.([^.\s].*)$")
_LINE_COMMENT_RE = re.compile(r"^//(?!//)")
_LIST_CONTINUATION = "+"


def _is_delimiter(line: str) -> bool:
    return bool(_DELIMITER_RE.match(line))


def _is_verbatim(delimiter: str) -> bool:
    return delimiter != "--" and delimiter[0] in _VERBATIM_CHARS


def parse_attribute_list(text: str) -> tuple[list[str], dict[str, str]]:
    """Split a block attribute list into positional and named values.

    ``float, role="isolated"`` gives ``(["float"], {"role": "isolated"})``.
    """
    positional: list[str] = []
    named: dict[str, str] = {}
    for token in re.findall(r'(?:[^,"]|"[^"]*")+', text):
        token = token.strip()
        if not token:
            continue
        if "=" in token:
            key, _, value = token.partition("=")
            named[key.strip()] = value.strip().strip("\"'")
        else:
            positional.append(token.strip("\"'"))
    return positional, named


def parse_style_shorthand(token: str) -> tuple[Optional[str], Optional[str], list[str]]:
    """Split a first positional value like ``appendix#ref.role`` into its parts.

    Returns:
        ``(style, id, roles)``. ``%option`` parts are dropped.
    """
    style: Optional[str] = None
    anchor_id: Optional[str] = None
    roles: list[str] = []
    for part in re.split(r"(?=[#.%])", token):
        if not part:
            continue
        marker, value = part[0], part[1:]
        if marker == "#":
            anchor_id = value or anchor_id
        elif marker == ".":
            if value:
                roles.append(value)
        elif marker != "%":
            style = part
    return style, anchor_id, roles


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class LineScanner(BlockContext):
    """Walks a list of lines, tracking the block context of the cursor."""

    def __init__(self, lines: Iterable[str]):
        self._lines = [line.rstrip("\r\n") for line in lines]
        self._index = 0
        self._delimiters: list[str] = []
        self._in_paragraph = False
        self._continuation = False
        self._buffer: list[str] = []
        self._buffer_metadata = BlockMetadata()
        self.metadata = BlockMetadata()

    @classmethod
    def from_text(cls, text: str) -> LineScanner:
        return cls(text.splitlines())

    # -- BlockContext -------------------------------------------------------

    def is_heading_eligible(self) -> bool:
        return not (self._delimiters or self._in_paragraph or self._continuation)

    def peek_line(self, offset: int = 0) -> Optional[str]:
        position = self._index + offset
        if 0 <= position < len(self._lines):
            return self._lines[position]
        return None

    # -- Cursor -------------------------------------------------------------

    @property
    def line_number(self) -> int:
        """1-based number of the current line."""
        return self._index + 1

    def at_end(self) -> bool:
        return self._index >= len(self._lines)

    def advance(self, count: int = 1) -> None:
        """Consume lines that formed a heading; the next line starts a block."""
        self._index += count
        self._in_paragraph = False
        self._continuation = False

    # -- Boundary-level syntax ----------------------------------------------

    def skip_blank(self) -> bool:
        """Consume a blank line outside delimited blocks."""
        line = self.peek_line()
        if line is None or line.strip() or self._delimiters:
            return False
        self._index += 1
        self._in_paragraph = False
        self._continuation = False
        return True

    def read_attribute_entry(self) -> Optional[tuple[str, Optional[str]]]:
        """Consume an attribute entry line at a block boundary.

        Returns:
            ``(name, value)`` where value is None if the entry unsets
            the attribute, or None if the line is not an attribute entry.
        """
        if not self.is_heading_eligible():
            return None
        match = _ATTRIBUTE_ENTRY_RE.match(self.peek_line() or "")
        if not match:
            return None
        self._index += 1
        unset_prefix, name, unset_suffix, value = match.groups()
        if unset_prefix or unset_suffix:
            return name, None
        return name, (value or "").strip()

    def read_metadata(self) -> bool:
        """Consume a comment or metadata line at a block boundary.

        Metadata accumulates in :attr:`metadata` until a heading or
        content block claims it.
        """
        if not self.is_heading_eligible():
            return False
        line = self.peek_line() or ""

        if _LINE_COMMENT_RE.match(line):
            self._index += 1
            return True

        if match := _ANCHOR_RE.match(line):
            self.metadata.anchor_id = match.group(1)
            self.metadata.reftext = match.group(2)
        elif match := _BLOCK_ATTRIBUTES_RE.match(line):
            positional, named = parse_attribute_list(match.group(1))
            if positional:
                style, anchor_id, roles = parse_style_shorthand(positional[0])
                if style:
                    self.metadata.style = style
                if anchor_id:
                    self.metadata.anchor_id = anchor_id
                if roles:
                    self.metadata.role = " ".join(roles)
            if "role" in named:
                self.metadata.role = named.pop("role")
            if "id" in named:
                self.metadata.anchor_id = named.pop("id")
            self.metadata.attributes.update(named)
        elif match := _BLOCK_TITLE_RE.match(line):
            self.metadata.title = match.group(1)
        else:
            return False

        self._index += 1
        return True

    def take_metadata(self) -> BlockMetadata:
        """Hand over the collected metadata and start a fresh set."""
        metadata, self.metadata = self.metadata, BlockMetadata()
        return metadata

    # -- Content ------------------------------------------------------------

    def consume_content_line(self) -> None:
        """Consume the current line as body content, updating block state."""
        line = self._lines[self._index]
        self._index += 1

        if not self._buffer:
            self._buffer_metadata = self.take_metadata()
        self._buffer.append(line)

        if self._delimiters:
            top = self._delimiters[-1]
            if line == top:
                self._delimiters.pop()
            elif not _is_verbatim(top) and _is_delimiter(line):
                self._delimiters.append(line)
            return

        # A delimiter only opens a block at a block start, never mid-paragraph
        if _is_delimiter(line) and not self._in_paragraph:
            self._delimiters.append(line)
            self._in_paragraph = False
            self._continuation = False
        elif line == _LIST_CONTINUATION:
            self._in_paragraph = False
            self._continuation = True
        else:
            self._in_paragraph = True
            self._continuation = False

    def flush_content(self) -> Optional[ContentBlock]:
        """Close and return the buffered content block, if any."""
        if not self._buffer:
            return None
        metadata = self._buffer_metadata
        block = ContentBlock(
            lines=self._buffer,
            style=metadata.style,
            id=metadata.anchor_id,
            title=metadata.title,
        )
        self._buffer = []
        self._buffer_metadata = BlockMetadata()
        return block

    def finish(self) -> Optional[ContentBlock]:
        """Flush remaining content at end of input."""
        if self._delimiters:
            logger.debug(
                "Unterminated delimited block %r at end of input", self._delimiters[-1]
            )
        self._delimiters.clear()
        return self.flush_content()
