"""Configuration model validation and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from schemabridge.config.models import ConverterConfig, LoaderConfig, SchemaBridgeConfig
from schemabridge.services.errors import SchemaLoadError


def test_converter_aliases_merge_over_builtins() -> None:
    """User aliases are lower-cased and merged with the built-in table."""
    config = ConverterConfig(legacy_type_aliases={"VarChar": "String"})
    if config.legacy_type_aliases.get("varchar") != "string":
        pytest.fail(f"Alias not normalized: {config.legacy_type_aliases}")
    if config.legacy_type_aliases.get("clob") != "text":
        pytest.fail("Built-in aliases must survive a merge")


def test_loader_requires_a_source() -> None:
    """An empty source list is rejected."""
    with pytest.raises(ValidationError):
        LoaderConfig(sources=[])


def test_from_yaml_resolves_relative_sources(tmp_path: Path) -> None:
    """Relative sources are resolved against the config file's directory."""
    config_path = tmp_path / "schemabridge.yml"
    config_path.write_text(
        "loader:\n  sources: [schema]\nexport:\n  format: json\nconverter:\n  synthetic_id_field: pk\n",
        encoding="utf8",
    )
    config = SchemaBridgeConfig.from_yaml(config_path)
    if config.loader.sources != [tmp_path / "schema"]:
        pytest.fail(f"Unexpected sources: {config.loader.sources}")
    if config.export.format != "json" or config.converter.synthetic_id_field != "pk":
        pytest.fail(f"Unexpected config values: {config}")


def test_from_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    """A config file must hold a mapping."""
    config_path = tmp_path / "bad.yml"
    config_path.write_text("- nope\n", encoding="utf8")
    with pytest.raises(SchemaLoadError):
        SchemaBridgeConfig.from_yaml(config_path)
