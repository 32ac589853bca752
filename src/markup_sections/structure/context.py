"""Per-parse mutable state.

Every document parse owns one :class:`ParseContext`. Nothing in it is
shared between parses, so concurrent parses need no locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class IdRegistry:
    """Ids used so far plus the next collision suffix per base id."""

    used: set[str] = field(default_factory=set)
    explicit: set[str] = field(default_factory=set)
    counters: dict[str, int] = field(default_factory=dict)

    def __contains__(self, candidate: str) -> bool:
        return candidate in self.used

    def register(self, id_: str, explicit: bool = False) -> str:
        self.used.add(id_)
        if explicit:
            self.explicit.add(id_)
        return id_

    def unique(self, base: str) -> str:
        """Return ``base`` or the first free ``base_2``, ``base_3``, ..."""
        if base not in self.used:
            return base
        number = self.counters.get(base, 2)
        while f"{base}_{number}" in self.used:
            number += 1
        self.counters[base] = number + 1
        return f"{base}_{number}"


def next_letter(letter: str) -> str:
    """Successor in the A, B, ..., Z, AA, AB, ... sequence."""
    chars = list(letter)
    index = len(chars) - 1
    while index >= 0:
        if chars[index] != "Z":
            chars[index] = chr(ord(chars[index]) + 1)
            return "".join(chars)
        chars[index] = "A"
        index -= 1
    return "A" + "".join(chars)


@dataclass
class ParseContext:
    """State threaded through tree construction and numbering."""

    ids: IdRegistry = field(default_factory=IdRegistry)
    ordinals: dict[int, int] = field(default_factory=dict)
    appendix_letter: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def next_ordinal(self, parent: object) -> int:
        """Next ordinal among the numbered children of ``parent``."""
        key = id(parent)
        number = self.ordinals.get(key, 0) + 1
        self.ordinals[key] = number
        return number

    def next_appendix_letter(self) -> str:
        if self.appendix_letter is None:
            self.appendix_letter = "A"
        else:
            self.appendix_letter = next_letter(self.appendix_letter)
        return self.appendix_letter

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)
