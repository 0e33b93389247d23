"""Tests for the graphql-core schema parser adapter."""

import pytest

from types_splitter.core.schema import GraphQLCoreParser, load_document
from types_splitter.errors import SchemaLoadError
from types_splitter.models import DefinitionKind, FieldKind

SCHEMA = '''\
schema {
  query: Query
}

"""
Root query.
"""
type Query {
  "A race"
  race(id: ID!): Race
  races: [Race]
}

extend type Mutation {
  bet(raceId: ID!): Boolean
}

interface Node {
  id: ID!
}

union Result = Race | Node

enum Status {
  OPEN
  CLOSED
}

input RaceFilter {
  status: Status
}

scalar Time

directive @cached on FIELD_DEFINITION

type Race implements Node {
  id: ID!
  at: Time
}
'''


@pytest.fixture
def definitions(parser: GraphQLCoreParser):
    return parser.parse("schema.graphql", SCHEMA)


def _by_name(definitions, name: str):
    return next(definition for definition in definitions if definition.name == name)


def test_kinds_in_order(definitions) -> None:
    assert [(definition.name, definition.kind) for definition in definitions] == [
        ("schema", DefinitionKind.SCHEMA),
        ("Query", DefinitionKind.QUERY),
        ("Mutation", DefinitionKind.MUTATION),
        ("Node", DefinitionKind.INTERFACE),
        ("Result", DefinitionKind.UNION),
        ("Status", DefinitionKind.ENUM),
        ("RaceFilter", DefinitionKind.INPUT),
        ("Time", DefinitionKind.SCALAR),
        ("cached", DefinitionKind.DIRECTIVE),
        ("Race", DefinitionKind.OBJECT),
    ]


def test_every_span_matches_its_content(definitions) -> None:
    for definition in definitions:
        assert definition.source == "schema.graphql"
        assert SCHEMA[definition.actual.start : definition.actual.end + 1] == definition.content
        for field in definition.fields:
            assert SCHEMA[field.actual.start : field.actual.end + 1] == field.content


def test_root_declaration_with_block_description(definitions) -> None:
    query = _by_name(definitions, "Query")
    assert query.extension is False
    assert query.raw.start == SCHEMA.index("type Query")
    assert query.raw.end == SCHEMA.index("}", SCHEMA.index("type Query"))
    assert query.raw.line == 8
    assert query.actual.line == 5
    assert query.content.startswith('"""\nRoot query.\n"""\ntype Query {')


def test_root_fields(definitions) -> None:
    query = _by_name(definitions, "Query")
    assert [(field.name, field.kind) for field in query.fields] == [
        ("race", FieldKind.QUERY),
        ("races", FieldKind.QUERY),
    ]
    race = query.fields[0]
    assert race.raw.start == SCHEMA.index('"A race"')
    assert race.raw.line == 9
    assert race.content == '  "A race"\n  race(id: ID!): Race'


def test_extension(definitions) -> None:
    mutation = _by_name(definitions, "Mutation")
    assert mutation.extension is True
    assert mutation.root_kind is FieldKind.MUTATION
    assert [field.kind for field in mutation.fields] == [FieldKind.MUTATION]


def test_object_and_interface_fields(definitions) -> None:
    assert [field.name for field in _by_name(definitions, "Node").fields] == ["id"]
    race = _by_name(definitions, "Race")
    assert [(field.name, field.kind) for field in race.fields] == [("id", FieldKind.OBJECT), ("at", FieldKind.OBJECT)]
    assert _by_name(definitions, "RaceFilter").fields == []


def test_bodies(definitions) -> None:
    assert _by_name(definitions, "Result").has_body is False
    assert _by_name(definitions, "Result").content == "union Result = Race | Node"
    assert _by_name(definitions, "Time").has_body is False
    assert _by_name(definitions, "Time").content == "scalar Time"
    assert _by_name(definitions, "cached").content == "directive @cached on FIELD_DEFINITION"
    assert _by_name(definitions, "Status").has_body is True
    assert _by_name(definitions, "schema").has_body is True


def test_block_description_behind_comment_stays_with_field(parser: GraphQLCoreParser) -> None:
    text = 'type Query {\n  """\n  Races.\n  """\n  # internal\n  races: [Race]\n  other: Int\n}\n'
    (query,) = parser.parse("schema.graphql", text)
    assert query.fields[0].content == '  """\n  Races.\n  """\n  # internal\n  races: [Race]'


def test_empty_text(parser: GraphQLCoreParser) -> None:
    assert parser.parse("empty.graphql", "\n  \n") == []


def test_comments_only(parser: GraphQLCoreParser) -> None:
    assert parser.parse("placeholder.graphql", "# nothing here yet\n\n  # scalar Time\n") == []


def test_comment_only_file_does_not_stop_loading() -> None:
    document = load_document(
        {"placeholder.graphql": "# nothing here\n", "schema.graphql": "type Query {\n  race: Int\n  b: Int\n}\n"}
    )
    assert document.buffers["placeholder.graphql"].text == "# nothing here\n"
    assert [definition.name for definition in document.definitions] == ["Query"]


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("type Query {\n  races: [Race\n}\n", "broken.graphql"),
        ("query { races { id } }\n", "executable definitions"),
        ("type Query {\n  a: Int b: Int\n}\n", "own line"),
        ("type Query { a: Int }\n", "own lines"),
        ("scalar A scalar B\n", "own line"),
        ("type Query { raceCard(id: ID!): RaceCard \n accountBalance: Int }\n", "fields of Query"),
    ],
    ids=[
        "syntax-error",
        "executable",
        "fields-on-one-line",
        "single-line-root",
        "declarations-on-one-line",
        "fields-beside-braces",
    ],
)
def test_load_errors(parser: GraphQLCoreParser, text: str, message: str) -> None:
    with pytest.raises(SchemaLoadError, match=message):
        parser.parse("broken.graphql", text)


class TestLoadDocument:
    def test_registers_in_input_order(self) -> None:
        document = load_document(
            {
                "b.graphql": "extend type Query {\n  b: Int\n}\n",
                "a.graphql": "type Query {\n  a: Int\n}\n",
            }
        )
        assert list(document.buffers) == ["b.graphql", "a.graphql"]
        assert [field.name for field in document.fields] == ["b", "a"]

    def test_canonical_buffer_is_the_plain_declaration(self) -> None:
        document = load_document(
            {
                "b.graphql": "extend type Query {\n  b: Int\n}\n",
                "a.graphql": "type Query {\n  a: Int\n}\n",
            }
        )
        assert document.canonical == {FieldKind.QUERY: "a.graphql"}

    def test_parent_and_origin(self) -> None:
        document = load_document({"a.graphql": "type Query {\n  a: Int\n}\n"})
        (field,) = document.fields
        assert document.parent_of(field).name == "Query"
        assert document.origin_of(field) == "a.graphql"
