import logging
from collections.abc import Mapping
from itertools import pairwise

from graphql import GraphQLSyntaxError, Source, parse
from graphql.language import (
    DefinitionNode,
    DirectiveDefinitionNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    ExecutableDefinitionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    Lexer,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    Token,
    TokenKind,
    TypeExtensionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from types_splitter.core.document import Document, Observer
from types_splitter.core.ports.parser import SchemaParser
from types_splitter.core.spans import wrap_definition, wrap_field_definition
from types_splitter.errors import SchemaLoadError
from types_splitter.models import (
    ROOT_KIND_BY_TYPE_NAME,
    Definition,
    DefinitionKind,
    FieldKind,
    Span,
)

logger = logging.getLogger(__name__)

_DEFINITION_KINDS: list[tuple[tuple[type[DefinitionNode], ...], DefinitionKind]] = [
    ((ObjectTypeDefinitionNode, ObjectTypeExtensionNode), DefinitionKind.OBJECT),
    ((InterfaceTypeDefinitionNode, InterfaceTypeExtensionNode), DefinitionKind.INTERFACE),
    ((UnionTypeDefinitionNode, UnionTypeExtensionNode), DefinitionKind.UNION),
    ((EnumTypeDefinitionNode, EnumTypeExtensionNode), DefinitionKind.ENUM),
    ((InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode), DefinitionKind.INPUT),
    ((ScalarTypeDefinitionNode, ScalarTypeExtensionNode), DefinitionKind.SCALAR),
    ((SchemaDefinitionNode, SchemaExtensionNode), DefinitionKind.SCHEMA),
    ((DirectiveDefinitionNode,), DefinitionKind.DIRECTIVE),
]

_ROOT_DEFINITION_KINDS = {
    FieldKind.QUERY: DefinitionKind.QUERY,
    FieldKind.MUTATION: DefinitionKind.MUTATION,
    FieldKind.SUBSCRIPTION: DefinitionKind.SUBSCRIPTION,
}


class GraphQLCoreParser:
    """Schema parser backed by graphql-core.

    Operation roots are recognised by the type names ``Query``, ``Mutation`` and ``Subscription``.
    """

    def parse(self, name: str, text: str) -> list[Definition]:
        try:
            source = Source(text, name)
            if Lexer(source).advance().kind is TokenKind.EOF:
                # blank or comments only
                return []
            document = parse(source)
        except GraphQLSyntaxError as exc:
            raise SchemaLoadError(f"{name}: {exc.message}") from exc

        definitions = [self._wrap(name, text, node) for node in document.definitions]
        check_layout(name, definitions)

        logger.debug(
            "Parsed %s: %d declarations, %d fields",
            name,
            len(definitions),
            sum(len(definition.fields) for definition in definitions),
        )
        return definitions

    def _wrap(self, name: str, text: str, node: DefinitionNode) -> Definition:
        if isinstance(node, ExecutableDefinitionNode):
            raise SchemaLoadError(f"{name}:{_start_token(node).line}: executable definitions are not supported")

        kind = definition_kind(node)
        type_name = node.name.value if getattr(node, "name", None) else kind.value
        root_kind = ROOT_KIND_BY_TYPE_NAME.get(type_name) if kind is DefinitionKind.OBJECT else None
        if root_kind is not None:
            kind = _ROOT_DEFINITION_KINDS[root_kind]

        definition = wrap_definition(
            text,
            type_name,
            kind,
            _raw_span(name, node),
            extension=isinstance(node, (TypeExtensionNode, SchemaExtensionNode)),
            has_body=bool(
                getattr(node, "fields", None) or getattr(node, "values", None) or getattr(node, "operation_types", None)
            ),
        )

        if kind.is_root or kind in (DefinitionKind.OBJECT, DefinitionKind.INTERFACE):
            field_kind = root_kind or FieldKind.OBJECT
            definition.fields = [
                wrap_field_definition(text, field_node.name.value, field_kind, _raw_span(name, field_node))
                for field_node in node.fields or ()
            ]
        return definition


def definition_kind(node: DefinitionNode) -> DefinitionKind:
    for node_types, kind in _DEFINITION_KINDS:
        if isinstance(node, node_types):
            return kind
    raise SchemaLoadError(f"Unsupported definition '{node.kind}'")


def check_layout(name: str, definitions: list[Definition]) -> None:
    """Declarations, and fields of operation roots, have to start on their own lines to be cut out cleanly."""
    ordered = sorted(definitions, key=lambda definition: definition.actual.start)
    for previous, current in pairwise(ordered):
        if current.actual.start <= previous.actual.end:
            raise SchemaLoadError(f"{name}:{current.raw.line}: {current.name} has to start on its own line")

    for definition in definitions:
        if not definition.kind.is_root or not definition.fields:
            continue
        fields = sorted(definition.fields, key=lambda field: field.actual.start)
        if fields[0].actual.start <= definition.raw.start or fields[-1].actual.end >= definition.raw.end:
            raise SchemaLoadError(
                f"{name}:{definition.raw.line}: fields of {definition.name} have to be on their own lines"
            )
        for previous_field, current_field in pairwise(fields):
            if current_field.actual.start <= previous_field.actual.end:
                raise SchemaLoadError(
                    f"{name}:{current_field.raw.line}: {definition.name}.{current_field.name} "
                    "has to start on its own line"
                )


def load_document(
    sources: Mapping[str, str],
    parser: SchemaParser | None = None,
    observer: Observer | None = None,
) -> Document:
    """Parse every source, in order, into one document."""
    parser = parser or GraphQLCoreParser()
    document = Document(observer=observer)
    for name, text in sources.items():
        document.add_buffer(name, text, parser.parse(name, text))
    return document


def _start_token(node: DefinitionNode | FieldDefinitionNode) -> Token:
    """First token of ``node`` after a block description; a plain string description stays part of the node.

    A block description separated from the node by ``#`` comments stays part of the node as well, since the
    backward doc-block scan stops at comments.
    """
    description = getattr(node, "description", None)
    if description is None or not description.block:
        return node.loc.start_token

    token = description.loc.end_token.next
    if token is None or token.kind is TokenKind.COMMENT:
        return node.loc.start_token
    return token


def _raw_span(name: str, node: DefinitionNode | FieldDefinitionNode) -> Span:
    token = _start_token(node)
    return Span(start=token.start, end=node.loc.end - 1, line=token.line, source=name)
