from enum import Enum

from pydantic import BaseModel, Field


class DefinitionKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"
    OBJECT = "object"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    INPUT = "input"
    SCALAR = "scalar"
    SCHEMA = "schema"
    DIRECTIVE = "directive"

    @property
    def is_root(self) -> bool:
        return self in (DefinitionKind.QUERY, DefinitionKind.MUTATION, DefinitionKind.SUBSCRIPTION)

    @property
    def is_relocatable(self) -> bool:
        """Whether a declaration of this kind can be routed by the ``types`` rules."""
        return not self.is_root and self not in (DefinitionKind.SCHEMA, DefinitionKind.DIRECTIVE)


class FieldKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"
    OBJECT = "object"

    @property
    def is_root(self) -> bool:
        return self is not FieldKind.OBJECT


class SourceCategory(str, Enum):
    ORIGINAL = "original"
    QUERY_EXTENDED = "query_extended"
    MUTATION_EXTENDED = "mutation_extended"
    SUBSCRIPTION_EXTENDED = "subscription_extended"
    OBJECT = "object"


ROOT_KIND_BY_TYPE_NAME = {
    "Query": FieldKind.QUERY,
    "Mutation": FieldKind.MUTATION,
    "Subscription": FieldKind.SUBSCRIPTION,
}

TYPE_NAME_BY_ROOT_KIND = {kind: name for name, kind in ROOT_KIND_BY_TYPE_NAME.items()}

EXTENDED_CATEGORY_BY_ROOT_KIND = {
    FieldKind.QUERY: SourceCategory.QUERY_EXTENDED,
    FieldKind.MUTATION: SourceCategory.MUTATION_EXTENDED,
    FieldKind.SUBSCRIPTION: SourceCategory.SUBSCRIPTION_EXTENDED,
}


class Span(BaseModel):
    """Inclusive character range ``[start, end]`` inside the buffer named ``source``.

    ``line`` is the 1-based line of ``start``. ``source`` is ``None`` once the entity has been deleted.
    """

    start: int
    end: int
    line: int
    source: str | None = None

    def shift(self, offset: int, lines: int) -> None:
        self.start -= offset
        self.end -= offset
        self.line -= lines


class FieldDefinition(BaseModel):
    name: str
    kind: FieldKind
    raw: Span
    actual: Span
    content: str

    @property
    def source(self) -> str | None:
        """Buffer the field physically lives in."""
        return self.raw.source

    def mark_relocated(self, destination: str | None) -> None:
        self.actual.source = destination

    def commit_relocation(self) -> None:
        self.raw.source = self.actual.source


class Definition(BaseModel):
    name: str
    kind: DefinitionKind
    raw: Span
    actual: Span
    content: str
    extension: bool = False
    has_body: bool = True
    fields: list[FieldDefinition] = Field(default_factory=list)

    @property
    def source(self) -> str | None:
        """Buffer the definition physically lives in."""
        return self.raw.source

    @property
    def root_kind(self) -> FieldKind | None:
        return ROOT_KIND_BY_TYPE_NAME.get(self.name) if self.kind.is_root else None

    def mark_relocated(self, destination: str | None) -> None:
        # fields that already left on their own stay where they are
        for field in self.fields:
            if field.source == self.source:
                field.mark_relocated(destination)
        self.actual.source = destination

    def commit_relocation(self) -> None:
        self.raw.source = self.actual.source
        for field in self.fields:
            field.commit_relocation()
