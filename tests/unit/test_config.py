"""Tests for Config loading, defaults and in-document attribute entries."""

import pytest

from markup_sections.config import Config, SectionConfig, TocConfig
from markup_sections.exceptions import ConfigError
from markup_sections.pipeline import Pipeline


class TestConfigDefaults:
    def test_default_config(self):
        cfg = Config.default()
        assert cfg.verbose is False
        assert cfg.doctype == "article"
        assert cfg.sections.sectids is True
        assert cfg.sections.idprefix == "_"
        assert cfg.sections.idseparator == "_"
        assert cfg.sections.numbered is False
        assert cfg.toc.enabled is False
        assert cfg.toc.title == "Table of Contents"
        assert cfg.toc.levels is None

    def test_load_none_returns_default(self):
        cfg = Config.load(None)
        assert cfg.verbose is False
        assert cfg.sections.sectids is True


class TestConfigFromYAML:
    def test_full_yaml(self):
        yaml_text = """\
verbose: true
doctype: book
sections:
  sectids: false
  idprefix: "id_"
  idseparator: "-"
  numbered: true
  appendix_caption: Annex
toc:
  enabled: true
  title: Contents
  levels: 3
attributes:
  Product: Widget
"""
        cfg = Config.from_yaml_string(yaml_text)
        assert cfg.verbose is True
        assert cfg.doctype == "book"
        assert cfg.sections == SectionConfig(
            sectids=False,
            idprefix="id_",
            idseparator="-",
            numbered=True,
            appendix_caption="Annex",
        )
        assert cfg.toc == TocConfig(enabled=True, title="Contents", levels=3)
        assert cfg.attributes == {"product": "Widget"}

    def test_partial_yaml_uses_defaults(self):
        cfg = Config.from_yaml_string("sections:\n  idprefix: ''\n")
        assert cfg.sections.idprefix == ""
        assert cfg.sections.idseparator == "_"
        assert cfg.toc.enabled is False
        assert cfg.doctype == "article"

    def test_empty_yaml(self):
        cfg = Config.from_yaml_string("")
        assert cfg.sections.sectids is True

    def test_invalid_yaml_raises(self):
        with pytest.raises(ConfigError):
            Config.from_yaml_string("{{invalid yaml::")

    def test_unknown_doctype_raises(self):
        with pytest.raises(ConfigError, match="Unknown doctype"):
            Config.from_yaml_string("doctype: slides\n")

    def test_non_mapping_raises(self):
        with pytest.raises(ConfigError, match="mapping"):
            Config.from_yaml_string("- a\n- b\n")

    def test_empty_string_values(self):
        cfg = Config.from_yaml_string(
            "sections:\n  idprefix:\n  idseparator:\n  appendix_caption:\ntoc:\n  title:\n"
        )
        assert cfg.sections.idprefix == ""
        assert cfg.sections.idseparator == ""
        assert cfg.sections.appendix_caption == ""
        assert cfg.toc.title == ""

    def test_empty_prefix_used_for_ids(self):
        cfg = Config.from_yaml_string("sections:\n  idprefix:\n")
        doc = Pipeline(cfg).parse_text("== My Title\n")
        assert doc.sections[0].id == "my_title"

    @pytest.mark.parametrize(
        "yaml_text, key",
        [
            ("sections:\n  sectids: 'no'\n", "sectids"),
            ("sections:\n  numbered: 1\n", "numbered"),
            ("toc:\n  enabled: yes please\n", "enabled"),
            ("toc:\n  levels: deep\n", "levels"),
        ],
    )
    def test_invalid_value_types_raise(self, yaml_text, key):
        with pytest.raises(ConfigError, match=key):
            Config.from_yaml_string(yaml_text)

    def test_non_mapping_section_raises(self):
        with pytest.raises(ConfigError, match="sections"):
            Config.from_yaml_string("sections: [a, b]\n")

    def test_unknown_keys_ignored(self):
        yaml_text = """\
sections:
  idprefix: "x_"
  unknown_key: "ignored"
toc:
  future_setting: true
"""
        cfg = Config.from_yaml_string(yaml_text)
        assert cfg.sections.idprefix == "x_"
        assert cfg.toc.enabled is False


class TestConfigFromFile:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            Config.from_yaml(tmp_path / "nonexistent.yaml")

    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("verbose: true\nsections:\n  numbered: true\n")
        cfg = Config.load(config_file)
        assert cfg.verbose is True
        assert cfg.sections.numbered is True


class TestApplyAttribute:
    def test_unset_sectids(self):
        cfg = Config.default()
        cfg.apply_attribute("sectids", None)
        assert cfg.sections.sectids is False
        assert "sectids" not in cfg.attributes

    def test_blank_idprefix(self):
        cfg = Config.default()
        cfg.apply_attribute("idprefix", "")
        assert cfg.sections.idprefix == ""

    def test_idseparator(self):
        cfg = Config.default()
        cfg.apply_attribute("idseparator", "-")
        assert cfg.sections.idseparator == "-"

    @pytest.mark.parametrize("name", ["numbered", "sectnums", "NUMBERED"])
    def test_numbering_aliases(self, name):
        cfg = Config.default()
        cfg.apply_attribute(name, "")
        assert cfg.sections.numbered is True
        cfg.apply_attribute(name, None)
        assert cfg.sections.numbered is False

    def test_toc_settings(self):
        cfg = Config.default()
        cfg.apply_attribute("toc", "")
        cfg.apply_attribute("toc-title", "Contents")
        cfg.apply_attribute("toclevels", "3")
        assert cfg.toc == TocConfig(enabled=True, title="Contents", levels=3)

    def test_invalid_toclevels_raises(self):
        cfg = Config.default()
        with pytest.raises(ConfigError, match="toclevels"):
            cfg.apply_attribute("toclevels", "deep")
        assert cfg.toc.levels is None

    def test_doctype(self):
        cfg = Config.default()
        cfg.apply_attribute("doctype", "book")
        assert cfg.doctype == "book"
        with pytest.raises(ConfigError):
            cfg.apply_attribute("doctype", "slides")
        assert cfg.doctype == "book"

    def test_appendix_caption(self):
        cfg = Config.default()
        cfg.apply_attribute("appendix-caption", "Annex")
        assert cfg.sections.appendix_caption == "Annex"

    def test_custom_attribute_is_recorded(self):
        cfg = Config.default()
        cfg.apply_attribute("product", "Widget")
        assert cfg.attributes["product"] == "Widget"

    def test_copy_is_independent(self):
        cfg = Config.default()
        copy = cfg.copy()
        copy.apply_attribute("numbered", "")
        copy.apply_attribute("product", "Widget")
        assert cfg.sections.numbered is False
        assert cfg.attributes == {}
