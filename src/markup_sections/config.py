"""YAML-backed configuration for the section resolver.

Configuration comes from two places: a YAML file loaded before parsing,
and attribute entries (``:name: value``) found in the document itself.
The latter are applied to a per-parse copy via :meth:`Config.apply_attribute`.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from markup_sections.exceptions import ConfigError

DOCTYPES = ("article", "book", "manpage")


def _clean_fields(
    section: str,
    data: dict,
    target: type,
    strings: tuple[str, ...] = (),
    flags: tuple[str, ...] = (),
) -> dict:
    """Keep known keys of a YAML mapping and check their value types.

    An empty value (``idprefix:``) loads as None and means the empty string.

    Raises:
        ConfigError: If a flag is not a boolean or a level is not an integer.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"'{section}' must be a mapping")

    values = {k: v for k, v in data.items() if k in target.__dataclass_fields__}
    for key in strings:
        if key in values:
            values[key] = "" if values[key] is None else str(values[key])
    for key in flags:
        if key in values and not isinstance(values[key], bool):
            raise ConfigError(f"{section}.{key} must be true or false, got {values[key]!r}")
    levels = values.get("levels")
    if levels is not None and (isinstance(levels, bool) or not isinstance(levels, int)):
        raise ConfigError(f"{section}.levels must be an integer, got {levels!r}")
    return values


@dataclass
class SectionConfig:
    """Id generation and numbering settings."""

    sectids: bool = True
    idprefix: str = "_"
    idseparator: str = "_"
    numbered: bool = False
    appendix_caption: str = "Appendix"


@dataclass
class TocConfig:
    """Table of contents settings."""

    enabled: bool = False
    title: str = "Table of Contents"
    levels: Optional[int] = None  # None means every level


@dataclass
class Config:
    """Top-level resolver configuration."""

    doctype: str = "article"
    sections: SectionConfig = field(default_factory=SectionConfig)
    toc: TocConfig = field(default_factory=TocConfig)
    attributes: dict[str, str] = field(default_factory=dict)
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Load configuration from a YAML file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
            data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}")

        return cls._from_dict(data)

    @classmethod
    def from_yaml_string(cls, text: str) -> Config:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> Config:
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        section_data = data.get("sections") or {}
        toc_data = data.get("toc") or {}
        attributes = data.get("attributes") or {}

        doctype = str(data.get("doctype", "article")).lower()
        if doctype not in DOCTYPES:
            raise ConfigError(
                f"Unknown doctype: '{doctype}'. Available: {', '.join(DOCTYPES)}"
            )

        return cls(
            doctype=doctype,
            sections=SectionConfig(**_clean_fields(
                "sections", section_data, SectionConfig,
                strings=("idprefix", "idseparator", "appendix_caption"),
                flags=("sectids", "numbered"),
            )),
            toc=TocConfig(**_clean_fields(
                "toc", toc_data, TocConfig,
                strings=("title",),
                flags=("enabled",),
            )),
            attributes={str(k).lower(): "" if v is None else str(v) for k, v in attributes.items()},
            verbose=data.get("verbose", False),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the default configuration."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Config:
        """Load config from path, or return defaults if path is None."""
        if path is None:
            return cls.default()
        return cls.from_yaml(path)

    def copy(self) -> Config:
        """Return an independent copy for a single document parse."""
        return copy.deepcopy(self)

    def apply_attribute(self, name: str, value: Optional[str]) -> None:
        """Apply a document attribute entry.

        Args:
            name: Attribute name, e.g. ``numbered`` or ``idprefix``.
            value: Attribute value, or None when the entry unsets the attribute.

        Raises:
            ConfigError: If the value is not valid for the attribute.
        """
        name = name.lower()
        enabled = value is not None

        if name == "sectids":
            self.sections.sectids = enabled
        elif name == "idprefix":
            self.sections.idprefix = value or ""
        elif name == "idseparator":
            self.sections.idseparator = value or ""
        elif name in ("numbered", "sectnums"):
            self.sections.numbered = enabled
        elif name == "appendix-caption":
            self.sections.appendix_caption = value or ""
        elif name == "toc":
            self.toc.enabled = enabled
        elif name == "toc-title":
            self.toc.title = value or ""
        elif name == "toclevels":
            if value is None:
                self.toc.levels = None
            else:
                try:
                    self.toc.levels = int(value)
                except ValueError:
                    raise ConfigError(f"toclevels must be an integer, got '{value}'")
        elif name == "doctype":
            doctype = (value or "article").lower()
            if doctype not in DOCTYPES:
                raise ConfigError(
                    f"Unknown doctype: '{doctype}'. Available: {', '.join(DOCTYPES)}"
                )
            self.doctype = doctype

        if enabled:
            self.attributes[name] = value
        else:
            self.attributes.pop(name, None)
