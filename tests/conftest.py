"""Pytest configuration for the schemabridge test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemabridge.core.types import ClassSchemaDict
from schemabridge.mapping.converter import SchemaConverter
from schemabridge.mapping.types import TypeResolver

ARTICLE_YAML = """\
Article:
  tableName: blog.articles
  columns:
    title: string(100)
    body: clob
    published_at: timestamp
  indexes:
    title_idx:
      fields: [title]
    slug_unique:
      fields: [title, published_at]
      type: unique
  relations:
    User:
      foreignAlias: articles
      onDelete: CASCADE
    Tags:
      class: Tag
      refClass: ArticleTag
"""

USER_YAML = """\
User:
  columns:
    user_id:
      type: integer
      primary: true
      autoincrement: true
    username as login: string(32)
"""


@pytest.fixture
def resolver() -> TypeResolver:
    """Provide a resolver backed by the default type registry.

    Returns
    -------
    TypeResolver
        Resolver with the built-in legacy alias table.
    """
    return TypeResolver()


@pytest.fixture
def converter() -> SchemaConverter:
    """Provide a converter with default configuration.

    Returns
    -------
    SchemaConverter
        Converter using the default registry and tableize convention.
    """
    return SchemaConverter()


@pytest.fixture
def article_schema() -> ClassSchemaDict:
    """Return the minimal Article class used across converter tests.

    Returns
    -------
    ClassSchemaDict
        Two columns, no relations, no primary key.
    """
    return {"columns": {"title": "string(100)", "body": "clob"}}


@pytest.fixture
def schema_dir(tmp_path: Path) -> Path:
    """Write a small directory of legacy schema files.

    Returns
    -------
    Path
        Directory holding ``article.yml`` and ``user.yaml``.
    """
    root = tmp_path / "schema"
    root.mkdir()
    (root / "article.yml").write_text(ARTICLE_YAML, encoding="utf8")
    (root / "user.yaml").write_text(USER_YAML, encoding="utf8")
    (root / "notes.txt").write_text("not a schema", encoding="utf8")
    return root
