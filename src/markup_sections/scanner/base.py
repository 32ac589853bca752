"""Abstract block-context interface consulted by the heading recognizer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BlockMetadata:
    """Metadata lines collected above the next block.

    Filled from block attribute lines (``[appendix]``), anchors
    (``[[id]]``) and block titles (``.Title``).
    """

    style: Optional[str] = None
    role: Optional[str] = None
    anchor_id: Optional[str] = None
    reftext: Optional[str] = None
    title: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (
            self.style or self.role or self.anchor_id or self.title or self.attributes
        )


class BlockContext(ABC):
    """Capability query every scanner implementation must provide."""

    @abstractmethod
    def is_heading_eligible(self) -> bool:
        """Return whether the current line may start a heading.

        False inside delimited blocks, paragraphs, list-item continuations
        and any other nested content region.
        """

    @abstractmethod
    def peek_line(self, offset: int = 0) -> Optional[str]:
        """Return the line ``offset`` lines ahead without consuming it.

        Returns None past the end of input.
        """
