"""Exception hierarchy for markup-sections."""


class MarkupSectionsError(Exception):
    """Base exception for all markup-sections errors."""


class ConfigError(MarkupSectionsError):
    """Raised when configuration is invalid or missing."""


class SourceError(MarkupSectionsError):
    """Raised when a source document or saved JSON cannot be loaded."""


class StructureError(MarkupSectionsError):
    """Raised when the section tree builder is fed an impossible event sequence."""
