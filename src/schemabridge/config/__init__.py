"""Configuration models for normalizing schemabridge settings.

For CLI boundary models:
    from schemabridge.config import SchemaBridgeConfig, LoaderConfig, ConverterConfig, ExportConfig
"""

from schemabridge.config.models import (
    ConverterConfig,
    ExportConfig,
    ExportFormat,
    LoaderConfig,
    SchemaBridgeConfig,
)

__all__ = [
    "ConverterConfig",
    "ExportConfig",
    "ExportFormat",
    "LoaderConfig",
    "SchemaBridgeConfig",
]
