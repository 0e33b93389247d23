"""Tests for reading and writing schema files."""

from pathlib import Path

import pytest

from types_splitter.core.sources import (
    default_root,
    discover_schema_files,
    read_sources,
    remove_sources,
    source_name,
    write_outputs,
)
from types_splitter.errors import SchemaLoadError


@pytest.fixture
def schema_tree(tmp_path: Path) -> Path:
    (tmp_path / "graph").mkdir()
    (tmp_path / "graph" / "schema.graphql").write_text("type Query {\n  a: Int\n}\n")
    (tmp_path / "graph" / "extra.graphqls").write_text("scalar Time\n")
    (tmp_path / "graph" / "notes.md").write_text("# notes\n")
    (tmp_path / "root.gql").write_text("scalar Root\n")
    return tmp_path


class TestDiscover:
    def test_directories_are_searched_for_schema_files(self, schema_tree: Path) -> None:
        files = discover_schema_files([schema_tree])
        assert [path.relative_to(schema_tree).as_posix() for path in files] == [
            "graph/extra.graphqls",
            "graph/schema.graphql",
            "root.gql",
        ]

    def test_explicit_files_keep_their_order_once(self, schema_tree: Path) -> None:
        schema = schema_tree / "graph" / "schema.graphql"
        root = schema_tree / "root.gql"
        assert discover_schema_files([root, schema, root]) == [root, schema]

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaLoadError, match="File not found"):
            discover_schema_files([tmp_path / "missing.graphql"])


class TestNames:
    def test_default_root_is_common_parent(self, schema_tree: Path) -> None:
        files = [schema_tree / "graph" / "schema.graphql", schema_tree / "root.gql"]
        assert default_root(files) == schema_tree.resolve()

    def test_source_name_is_posix_relative(self, schema_tree: Path) -> None:
        assert source_name(schema_tree / "graph" / "schema.graphql", schema_tree) == "graph/schema.graphql"

    def test_outside_root(self, schema_tree: Path) -> None:
        with pytest.raises(SchemaLoadError, match="is not below"):
            source_name(schema_tree / "root.gql", schema_tree / "graph")


def test_read_sources(schema_tree: Path) -> None:
    sources, root = read_sources([schema_tree / "graph"])
    assert root == (schema_tree / "graph").resolve()
    assert sources == {"extra.graphqls": "scalar Time\n", "schema.graphql": "type Query {\n  a: Int\n}\n"}


def test_read_sources_with_root(schema_tree: Path) -> None:
    sources, root = read_sources([schema_tree / "graph" / "schema.graphql"], root=schema_tree)
    assert root == schema_tree
    assert list(sources) == ["graph/schema.graphql"]


def test_write_and_remove(tmp_path: Path) -> None:
    written = write_outputs({"graph/racing.schema.graphql": "extend type Query {\n  a: Int\n}\n"}, tmp_path)
    assert written == [tmp_path / "graph" / "racing.schema.graphql"]
    assert written[0].read_text() == "extend type Query {\n  a: Int\n}\n"

    remove_sources(["graph/racing.schema.graphql", "graph/missing.graphql"], tmp_path)
    assert not written[0].exists()
