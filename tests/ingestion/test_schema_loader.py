"""Tests for loading legacy YAML schema files."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemabridge.config.models import LoaderConfig
from schemabridge.ingestion.schema_loader import iter_schema_files, load_from_config, load_schema_document
from schemabridge.services.errors import SchemaLoadError


def test_directory_sources_are_globbed_and_sorted(schema_dir: Path) -> None:
    """Only matching files are yielded, in name order."""
    names = [path.name for path in iter_schema_files([schema_dir])]
    if names != ["article.yml", "user.yaml"]:
        pytest.fail(f"Unexpected schema files: {names}")


def test_load_merges_files(schema_dir: Path) -> None:
    """Classes from every file end up in one document."""
    document = load_schema_document([schema_dir])
    if list(document) != ["Article", "User"]:
        pytest.fail(f"Unexpected classes: {list(document)}")
    if document["Article"]["columns"]["title"] != "string(100)":
        pytest.fail(f"Unexpected Article columns: {document['Article']['columns']}")


def test_later_files_replace_classes(tmp_path: Path) -> None:
    """A class redefined in a later source keeps the later definition."""
    first = tmp_path / "a.yml"
    second = tmp_path / "b.yml"
    first.write_text("User:\n  tableName: old_users\n", encoding="utf8")
    second.write_text("User:\n  tableName: users\n", encoding="utf8")
    document = load_schema_document([first, second])
    if document["User"].get("tableName") != "users":
        pytest.fail(f"Later definition should win: {document['User']}")


def test_empty_file_and_empty_class(tmp_path: Path) -> None:
    """Empty files contribute nothing; empty classes become empty mappings."""
    (tmp_path / "empty.yml").write_text("", encoding="utf8")
    (tmp_path / "bare.yml").write_text("Bare:\n", encoding="utf8")
    document = load_schema_document([tmp_path])
    if document != {"Bare": {}}:
        pytest.fail(f"Unexpected document: {document}")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """YAML syntax errors surface as SchemaLoadError."""
    path = tmp_path / "broken.yml"
    path.write_text("User: [unclosed\n", encoding="utf8")
    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema_document([path])
    if excinfo.value.problem_detail.code != "loader.invalid_yaml":
        pytest.fail(f"Unexpected problem code: {excinfo.value.problem_detail.code}")


def test_non_mapping_document_raises(tmp_path: Path) -> None:
    """A top-level list is not a schema document."""
    path = tmp_path / "list.yml"
    path.write_text("- User\n- Article\n", encoding="utf8")
    with pytest.raises(SchemaLoadError, match="must map class names"):
        load_schema_document([path])


def test_missing_source_raises(tmp_path: Path) -> None:
    """Nonexistent sources are reported rather than skipped."""
    with pytest.raises(SchemaLoadError):
        load_schema_document([tmp_path / "nope.yml"])


def test_load_from_config_honours_patterns(schema_dir: Path) -> None:
    """Loader patterns restrict which directory entries are read."""
    document = load_from_config(LoaderConfig(sources=[schema_dir], patterns=("*.yml",)))
    if list(document) != ["Article"]:
        pytest.fail(f"Only article.yml should be read: {list(document)}")
