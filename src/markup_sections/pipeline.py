"""Pipeline orchestrator: scan → recognize → build tree → number → TOC.

:func:`resolve_document` is the single-document core; :class:`Pipeline`
wraps it with configuration, file loading, JSON export and reporting.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from markup_sections.config import Config
from markup_sections.exceptions import ConfigError, SourceError
from markup_sections.model.report import StructureReport
from markup_sections.model.schema import Document, Toc
from markup_sections.scanner.line_scanner import LineScanner
from markup_sections.structure.context import ParseContext
from markup_sections.structure.headings import HeadingRecognizer
from markup_sections.structure.numbering import SectionNumberer
from markup_sections.structure.subs import SubstitutionHook, default_substitutions
from markup_sections.structure.toc import build_toc
from markup_sections.structure.tree import SectionTreeBuilder

logger = logging.getLogger(__name__)


def resolve_document(
    lines: Iterable[str],
    config: Config,
    context: Optional[ParseContext] = None,
    substitute: Optional[SubstitutionHook] = None,
) -> Document:
    """Resolve the section structure of one document.

    Args:
        lines: Source lines, without line terminators.
        config: Configuration for this parse. Attribute entries found in
            the document are applied to it, so pass a copy.
        context: Per-parse state; a fresh one is created if omitted.
        substitute: Title substitution hook. Defaults to
            :func:`default_substitutions` over ``config.attributes``.

    Returns:
        The resolved Document, numbered, with a TOC when enabled.
    """
    context = context or ParseContext()
    substitute = substitute or default_substitutions(config.attributes)

    scanner = LineScanner(lines)
    recognizer = HeadingRecognizer()
    builder = SectionTreeBuilder(config, context, substitute)

    def emit(block) -> None:
        if block is not None:
            builder.add_content(block)

    while not scanner.at_end():
        if scanner.skip_blank():
            emit(scanner.flush_content())
            continue

        if scanner.is_heading_eligible():
            emit(scanner.flush_content())

            entry = scanner.read_attribute_entry()
            if entry is not None:
                _apply_attribute(config, context, *entry)
                continue

            if scanner.read_metadata():
                continue

            match = recognizer.recognize(
                scanner, scanner.metadata, title_allowed=not builder.started
            )
            if match is not None:
                scanner.take_metadata()
                scanner.advance(match.line_count)
                builder.add_heading(match.event)
                continue

        scanner.consume_content_line()

    emit(scanner.finish())

    root = builder.finish()
    SectionNumberer(config, context).apply(root)
    toc = build_toc(root, config.toc) if config.toc.enabled else None

    return Document(
        doctype=config.doctype,
        root=root,
        attributes=dict(config.attributes),
        toc=toc,
        warnings=list(context.warnings),
    )


def _apply_attribute(
    config: Config, context: ParseContext, name: str, value: Optional[str]
) -> None:
    try:
        config.apply_attribute(name, value)
    except ConfigError as exc:
        context.warn(f"Ignoring attribute '{name}': {exc}")


class Pipeline:
    """Orchestrates section resolution for text, lines or files."""

    def __init__(
        self,
        config: Config | None = None,
        substitute: Optional[SubstitutionHook] = None,
    ):
        self.config = config or Config.default()
        self.substitute = substitute
        self.last_report: StructureReport | None = None

    def parse_lines(self, lines: Iterable[str], source_file: str = "") -> Document:
        """Resolve a document given as lines.

        Each call works on its own copy of the configuration and its own
        ParseContext, so attribute entries and ids never leak between
        documents.
        """
        config = self.config.copy()
        context = ParseContext()

        t0 = time.monotonic()
        document = resolve_document(lines, config, context, self.substitute)
        t1 = time.monotonic()

        report = StructureReport.from_document(
            document, source_file=source_file, explicit_ids=context.ids.explicit
        )
        report.parse_time_seconds = t1 - t0
        self.last_report = report

        logger.info(
            "Resolved %d sections in %.3fs", report.section_count, report.parse_time_seconds
        )
        return document

    def parse_text(self, text: str, source_file: str = "") -> Document:
        """Resolve a document given as a single string."""
        return self.parse_lines(text.splitlines(), source_file=source_file)

    def parse_file(self, path: Path) -> Document:
        """Read and resolve a UTF-8 source file.

        Raises:
            SourceError: If the file cannot be read.
        """
        path = Path(path)
        logger.info("Parsing %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SourceError(f"Source file not found: {path}")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Failed to read {path}: {exc}") from exc
        return self.parse_text(text, source_file=path.name)

    def inspect(self, path: Path) -> str:
        """Parse a file and return the resolved document as JSON."""
        return self.parse_file(path).to_json()

    def toc(self, path: Path) -> Toc:
        """Parse a file and return its table of contents.

        The outline is built even when the document does not enable ``toc``.
        """
        pipeline = Pipeline(self.config.copy(), self.substitute)
        pipeline.config.toc.enabled = True
        document = pipeline.parse_file(path)
        self.last_report = pipeline.last_report
        return document.toc or build_toc(document.root, pipeline.config.toc)

    @staticmethod
    def save_json(document: Document, path: Path) -> Path:
        """Save a resolved document to a JSON file."""
        path = Path(path)
        logger.info("Saving document to %s", path)
        path.write_text(document.to_json(), encoding="utf-8")
        return path

    @staticmethod
    def load_json(path: Path) -> Document:
        """Load a resolved document saved with :meth:`save_json`.

        Raises:
            SourceError: If the file is missing or not a valid document.
        """
        path = Path(path)
        logger.info("Loading document from %s", path)
        try:
            json_str = path.read_text(encoding="utf-8")
            return Document.from_json(json_str)
        except FileNotFoundError:
            raise SourceError(f"Document file not found: {path}")
        except Exception as exc:
            raise SourceError(f"Failed to load document from {path}: {exc}") from exc
