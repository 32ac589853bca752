"""Structure report: diagnostics and statistics from a resolver run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SectionSummary:
    """One section as listed in the report."""

    id: Optional[str]
    title: str
    level: int
    sectname: str
    label: str


@dataclass
class StructureReport:
    """Summary of one document parse."""

    # Source info
    source_file: str = ""
    title: Optional[str] = None
    doctype: str = "article"

    # Timing
    parse_time_seconds: float = 0.0

    # Counts
    section_count: int = 0
    floating_title_count: int = 0
    content_block_count: int = 0
    explicit_id_count: int = 0
    synthetic_id_count: int = 0

    # {level: count} and {sectname: count}
    sections_by_level: dict[int, int] = field(default_factory=dict)
    sections_by_name: dict[str, int] = field(default_factory=dict)

    sections: list[SectionSummary] = field(default_factory=list)

    # Warnings collected during the parse
    warnings: list[str] = field(default_factory=list)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self._to_dict(), indent=indent, ensure_ascii=False)

    def _to_dict(self) -> dict:
        """Convert to a plain dict for JSON serialization."""
        return {
            "source_file": self.source_file,
            "title": self.title,
            "doctype": self.doctype,
            "timing": {
                "parse_seconds": round(self.parse_time_seconds, 3),
            },
            "counts": {
                "sections": self.section_count,
                "floating_titles": self.floating_title_count,
                "content_blocks": self.content_block_count,
                "explicit_ids": self.explicit_id_count,
                "synthetic_ids": self.synthetic_id_count,
            },
            "sections_by_level": {
                str(k): v for k, v in sorted(self.sections_by_level.items())
            },
            "sections_by_name": dict(sorted(self.sections_by_name.items())),
            "sections": [
                {
                    "id": item.id,
                    "label": item.label,
                    "level": item.level,
                    "sectname": item.sectname,
                }
                for item in self.sections
            ],
            "warnings": self.warnings,
        }

    @classmethod
    def from_document(
        cls, document: "Document", source_file: str = "", explicit_ids: Optional[set[str]] = None
    ) -> StructureReport:
        """Build a report by walking a resolved document.

        Args:
            document: The resolved document.
            source_file: Name of the parsed file, if any.
            explicit_ids: Ids the author supplied; every other id counts as
                synthetic.
        """
        report = cls(
            source_file=source_file,
            title=document.title,
            doctype=document.doctype,
            warnings=list(document.warnings),
        )
        _walk_blocks(document.root.blocks, report, explicit_ids or set())
        return report


def _walk_blocks(blocks: list, report: StructureReport, explicit_ids: set[str]) -> None:
    """Recursively walk blocks to populate report counters."""
    from markup_sections.model.schema import ContentBlock, Section
    from markup_sections.structure.toc import toc_label

    for block in blocks:
        if isinstance(block, Section):
            if block.is_floating:
                report.floating_title_count += 1
            else:
                report.section_count += 1
                report.sections_by_level[block.level] = (
                    report.sections_by_level.get(block.level, 0) + 1
                )
            name = block.sectname.value
            report.sections_by_name[name] = report.sections_by_name.get(name, 0) + 1
            if block.id is not None:
                if block.id in explicit_ids:
                    report.explicit_id_count += 1
                else:
                    report.synthetic_id_count += 1
            report.sections.append(
                SectionSummary(
                    id=block.id,
                    title=block.title,
                    level=block.level,
                    sectname=name,
                    label=toc_label(block),
                )
            )
            _walk_blocks(block.blocks, report, explicit_ids)
        elif isinstance(block, ContentBlock):
            report.content_block_count += 1
