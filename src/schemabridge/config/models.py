"""
Configuration models used by the schemabridge CLI and converter.

These Pydantic models normalize source paths, legacy type aliases, and export
settings so the loader, converter, and exporter can rely on consistent values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemabridge.mapping.types import LEGACY_TYPE_ALIASES
from schemabridge.services.errors import SchemaLoadError, problem

ExportFormat = Literal["yaml", "json"]

DEFAULT_SCHEMA_PATTERNS = ("*.yml", "*.yaml")


class LoaderConfig(BaseModel):
    """Where legacy schema documents are read from."""

    sources: list[Path] = Field(..., min_length=1, description="Schema files or directories")
    patterns: tuple[str, ...] = Field(
        default=DEFAULT_SCHEMA_PATTERNS,
        description="Glob patterns matched inside source directories",
    )

    @field_validator("sources", mode="before")
    @classmethod
    def _expand_user(cls, v: list[Path | str]) -> list[Path]:
        """
        Expand user home markers for path-like inputs.

        Returns
        -------
        list[Path]
            Expanded pathlib objects.
        """
        return [Path(str(item)).expanduser() for item in v]


class ConverterConfig(BaseModel):
    """Conversion knobs; the defaults reproduce the legacy tool's behaviour."""

    model_config = ConfigDict(frozen=True)

    legacy_type_aliases: dict[str, str] = Field(
        default_factory=lambda: dict(LEGACY_TYPE_ALIASES),
        description="Legacy type name -> current logical type name",
    )
    synthetic_id_field: str = Field(default="id", description="Field injected when no primary key is declared")
    synthetic_id_type: str = Field(default="integer", description="Logical type of the injected identifier")

    @field_validator("legacy_type_aliases", mode="before")
    @classmethod
    def _merge_aliases(cls, v: dict[str, str] | None) -> dict[str, str]:
        """
        Merge user aliases over the built-in table, lower-casing keys.

        Returns
        -------
        dict[str, str]
            Complete alias table.
        """
        merged = dict(LEGACY_TYPE_ALIASES)
        for legacy, current in (v or {}).items():
            merged[str(legacy).lower()] = str(current).lower()
        return merged


class ExportConfig(BaseModel):
    """Destination and serialization of converted mappings."""

    output: Path | None = Field(default=None, description="Output file; stdout when unset")
    format: ExportFormat = "yaml"


class SchemaBridgeConfig(BaseModel):
    """Top-level configuration for one conversion run."""

    loader: LoaderConfig
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Self:
        """
        Load a configuration file.

        Relative ``loader.sources`` entries are resolved against the directory
        holding the configuration file.

        Returns
        -------
        Self
            Validated configuration.

        Raises
        ------
        SchemaLoadError
            If the file cannot be read or is not a YAML mapping.
        """
        try:
            data = yaml.safe_load(path.read_text(encoding="utf8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise SchemaLoadError(
                problem(
                    code="config.unreadable",
                    title="Configuration could not be read",
                    detail=f"{path}: {exc}",
                    extras={"path": str(path)},
                )
            ) from exc
        if not isinstance(data, dict):
            raise SchemaLoadError(
                problem(
                    code="config.invalid_document",
                    title="Configuration is not a mapping",
                    detail=f"{path} must contain a YAML mapping",
                    extras={"path": str(path)},
                )
            )
        loader = data.get("loader")
        if isinstance(loader, dict) and "sources" in loader:
            base = path.parent
            loader["sources"] = [
                src if Path(src).expanduser().is_absolute() else base / src for src in loader["sources"]
            ]
        return cls.model_validate(data)
