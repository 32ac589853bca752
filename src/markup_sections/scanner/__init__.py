"""Block-context scanners."""

from markup_sections.scanner.base import BlockContext, BlockMetadata
from markup_sections.scanner.line_scanner import LineScanner

__all__ = ["BlockContext", "BlockMetadata", "LineScanner"]
