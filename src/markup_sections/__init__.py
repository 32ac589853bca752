"""markup-sections: resolve the section structure of lightweight-markup documents."""

from markup_sections.config import Config
from markup_sections.exceptions import (
    ConfigError,
    MarkupSectionsError,
    SourceError,
    StructureError,
)
from markup_sections.model import Document, Section, SectionName, Toc, TocEntry
from markup_sections.pipeline import Pipeline, resolve_document

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "Document",
    "MarkupSectionsError",
    "Pipeline",
    "Section",
    "SectionName",
    "SourceError",
    "StructureError",
    "Toc",
    "TocEntry",
    "resolve_document",
]
