"""Section id allocation."""

from __future__ import annotations

import re
from typing import Optional

from markup_sections.config import SectionConfig
from markup_sections.structure.context import IdRegistry
from markup_sections.structure.subs import SubstitutionHook

_NON_WORD_RE = re.compile(r"\W+")


class IdAllocator:
    """Derives synthetic ids from titles and keeps them unique per document."""

    def __init__(
        self,
        config: SectionConfig,
        registry: IdRegistry,
        substitute: Optional[SubstitutionHook] = None,
    ):
        self.config = config
        self.registry = registry
        self.substitute = substitute or (lambda text: text)

    def derive(self, title: str) -> str:
        """Build the base id for an already-substituted title.

        Lower-cases the title, turns each run of non-word characters into
        the separator (or drops it when the separator is empty), collapses
        repeated separators, trims them from both ends and adds the prefix.
        """
        separator = self.config.idseparator
        base = _NON_WORD_RE.sub(separator, title.lower())
        if separator:
            base = re.sub(f"(?:{re.escape(separator)})+", separator, base)
            if base.startswith(separator):
                base = base[len(separator):]
            if base.endswith(separator):
                base = base[: -len(separator)]
        return f"{self.config.idprefix}{base}"

    def allocate(self, title: str, explicit_id: Optional[str] = None) -> Optional[str]:
        """Return the id for a heading.

        Args:
            title: Raw title text; substitutions run before derivation.
            explicit_id: Author-supplied id, used verbatim when present.

        Returns:
            The registered id, or None when synthetic ids are disabled and
            no explicit id was given.
        """
        if explicit_id:
            return self.registry.register(explicit_id, explicit=True)
        if not self.config.sectids:
            return None
        base = self.derive(self.substitute(title))
        return self.registry.register(self.registry.unique(base))
