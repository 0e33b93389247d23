import logging
from collections.abc import Callable
from dataclasses import dataclass, field as dataclass_field
from itertools import chain

from types_splitter.core.render import render_objects, render_root_extension
from types_splitter.core.shift import Entity, apply_deletion, normalize_blank_lines
from types_splitter.errors import InternalConsistencyError
from types_splitter.models import (
    EXTENDED_CATEGORY_BY_ROOT_KIND,
    Definition,
    FieldDefinition,
    FieldKind,
    SourceCategory,
)

logger = logging.getLogger(__name__)


@dataclass
class Buffer:
    name: str
    text: str
    category: SourceCategory
    definitions: list[Definition] = dataclass_field(default_factory=list)
    fields: list[FieldDefinition] = dataclass_field(default_factory=list)

    @property
    def is_original(self) -> bool:
        return self.category is SourceCategory.ORIGINAL


@dataclass(frozen=True)
class ExcisionEvent:
    source: str
    entity: str
    before: str
    removed: str
    after: str
    start: int
    end: int


Observer = Callable[[ExcisionEvent], None]


class Document:
    """Schema buffers plus every declaration and field recorded in them.

    Entities refer to buffers by name. An entity is resident in a buffer while its raw span names that buffer;
    moves and deletions cut the entity's actual span out of the text and shift every other resident.
    """

    def __init__(self, observer: Observer | None = None) -> None:
        self.buffers: dict[str, Buffer] = {}
        self.definitions: list[Definition] = []
        self.fields: list[FieldDefinition] = []
        self.canonical: dict[FieldKind, str] = {}
        self.created: list[str] = []
        self.dropped: list[str] = []
        self.observer = observer
        self._parents: dict[int, Definition] = {}
        self._origins: dict[int, str] = {}

    def add_buffer(self, name: str, text: str, definitions: list[Definition]) -> Buffer:
        if name in self.buffers:
            raise ValueError(f"Duplicate buffer '{name}'")

        buffer = Buffer(name=name, text=text, category=SourceCategory.ORIGINAL)
        self.buffers[name] = buffer
        for definition in definitions:
            self.register(definition)
        return buffer

    def register(self, definition: Definition) -> None:
        if definition.source not in self.buffers:
            raise ValueError(f"Unknown buffer '{definition.source}' for {definition.name}")

        self.definitions.append(definition)
        for child in definition.fields:
            self.fields.append(child)
            self._parents[id(child)] = definition
            self._origins[id(child)] = definition.source

        root_kind = definition.root_kind
        if root_kind is not None and not definition.extension:
            self.canonical.setdefault(root_kind, definition.source)

    def parent_of(self, field: FieldDefinition) -> Definition:
        return self._parents[id(field)]

    def origin_of(self, field: FieldDefinition) -> str:
        return self._origins[id(field)]

    def residents(self, name: str) -> list[Entity]:
        """Entities physically in buffer ``name`` that are not on their way out of it."""
        return [
            entity
            for entity in chain(self.definitions, self.fields)
            if entity.raw.source == name and entity.actual.source == name
        ]

    def ensure_buffer(self, name: str, category: SourceCategory) -> Buffer:
        existing = self.buffers.get(name)
        if existing is None:
            if name in self.dropped:
                raise ValueError(f"Buffer '{name}' was already dropped")
            buffer = Buffer(name=name, text="", category=category)
            self.buffers[name] = buffer
            self.created.append(name)
            logger.debug("Created buffer %s (%s)", name, category.value)
            return buffer

        if existing.is_original:
            raise ValueError(f"Cannot relocate into original buffer '{name}'")
        if (existing.category is SourceCategory.OBJECT) != (category is SourceCategory.OBJECT):
            raise ValueError(f"Buffer '{name}' cannot hold both root fields and type declarations")
        return existing

    def move_field(self, field: FieldDefinition, destination: str) -> None:
        """Cut a root field out of its buffer and append it to the extension buffer ``destination``."""
        if not field.kind.is_root:
            raise ValueError(f"Only root fields can be moved on their own, not '{field.name}' ({field.kind.value})")

        buffer = self._buffer_of(field)
        parent = self.parent_of(field)
        target = self.ensure_buffer(destination, EXTENDED_CATEGORY_BY_ROOT_KIND[field.kind])

        field.mark_relocated(destination)
        following = [
            sibling
            for sibling in parent.fields
            if sibling.raw.source == buffer.name
            and sibling.actual.source == buffer.name
            and sibling.actual.start > field.actual.end
        ]
        bound = min((sibling.actual.start for sibling in following), default=None)
        self._excise(buffer, field, bound)
        field.commit_relocation()
        target.fields.append(field)

        logger.info("Moved field %s.%s from %s to %s", parent.name, field.name, buffer.name, destination)
        self._after_removal(buffer, parent)

    def move_definition(self, definition: Definition, destination: str) -> None:
        """Cut a declaration, fields included, out of its buffer and append it to ``destination``."""
        buffer = self._buffer_of(definition)
        target = self.ensure_buffer(destination, SourceCategory.OBJECT)

        definition.mark_relocated(destination)
        self._excise(buffer, definition, self._next_definition_start(buffer, definition))
        definition.commit_relocation()
        target.definitions.append(definition)

        logger.info("Moved %s %s from %s to %s", definition.kind.value, definition.name, buffer.name, destination)
        self._after_removal(buffer)

    def delete_definition(self, definition: Definition) -> None:
        buffer = self._buffer_of(definition)

        definition.mark_relocated(None)
        self._excise(buffer, definition, self._next_definition_start(buffer, definition))
        definition.commit_relocation()

        logger.info("Deleted empty %s %s from %s", definition.kind.value, definition.name, buffer.name)

    def verify(self, name: str) -> None:
        """Check that every resident's content is still found at its actual span."""
        text = self.buffers[name].text
        for entity in self.residents(name):
            found = text[entity.actual.start : entity.actual.end + 1]
            if found != entity.content:
                raise InternalConsistencyError(
                    f"{name}: {entity.name} expected {entity.content!r} at "
                    f"[{entity.actual.start}, {entity.actual.end}], found {found!r}"
                )

    def output(self) -> dict[str, str]:
        """Final text of every remaining buffer, sorted by name."""
        rendered: dict[str, str] = {}
        for name in sorted(self.buffers):
            buffer = self.buffers[name]
            if buffer.is_original:
                rendered[name] = buffer.text
            elif buffer.category is SourceCategory.OBJECT:
                rendered[name] = render_objects(buffer.definitions)
            else:
                canonical_kinds = {kind for kind, owner in self.canonical.items() if owner == name}
                rendered[name] = render_root_extension(buffer.fields, canonical_kinds)
        return rendered

    def _buffer_of(self, entity: Entity) -> Buffer:
        if entity.source is None or entity.source not in self.buffers:
            raise ValueError(f"'{entity.name}' does not live in any buffer")
        buffer = self.buffers[entity.source]
        if not buffer.is_original:
            raise ValueError(f"'{entity.name}' was already relocated to '{buffer.name}'")
        return buffer

    def _next_definition_start(self, buffer: Buffer, definition: Definition) -> int | None:
        return min(
            (
                other.actual.start
                for other in self.definitions
                if other.raw.source == buffer.name
                and other.actual.source == buffer.name
                and other.actual.start > definition.actual.end
            ),
            default=None,
        )

    def _excise(self, buffer: Buffer, entity: Entity, bound: int | None) -> None:
        """Remove ``entity`` up to ``bound`` (the next resident's start) or just its own span when there is none."""
        before = buffer.text
        start = entity.actual.start
        end = bound if bound is not None else entity.actual.end + 1

        if before[start : entity.actual.end + 1] != entity.content:
            raise InternalConsistencyError(f"{buffer.name}: content of {entity.name} is not at its recorded span")

        residents = self.residents(buffer.name)
        removed = before[start:end]
        buffer.text = before[:start] + before[end:]
        shrunk = apply_deletion(residents, start, removed)

        if bound is None:

            def on_delete(position: int, deleted: str) -> None:
                shrunk.extend(apply_deletion(residents, position, deleted))

            buffer.text = normalize_blank_lines(buffer.text, on_delete)

        for resident in shrunk:
            resident.content = buffer.text[resident.actual.start : resident.actual.end + 1]

        logger.debug("Excised %s from %s at [%d, %d)", entity.name, buffer.name, start, end)
        if self.observer is not None:
            self.observer(
                ExcisionEvent(
                    source=buffer.name,
                    entity=entity.name,
                    before=before,
                    removed=removed,
                    after=buffer.text,
                    start=start,
                    end=end,
                )
            )
        self.verify(buffer.name)

    def _after_removal(self, buffer: Buffer, parent: Definition | None = None) -> None:
        if self._is_empty(buffer.name):
            del self.buffers[buffer.name]
            self.dropped.append(buffer.name)
            logger.info("Dropped %s, nothing is left in it", buffer.name)
            for kind, owner in list(self.canonical.items()):
                if owner == buffer.name:
                    self._repoint_canonical(buffer.name, kind)
            return

        if parent is None or not parent.kind.is_root:
            return
        if any(child.source == buffer.name for child in parent.fields):
            return

        self.delete_definition(parent)
        if not parent.extension:
            kind = parent.root_kind
            if kind is None:
                raise InternalConsistencyError(f"{parent.name} is not an operation root")
            if self.canonical.get(kind) == buffer.name:
                self._repoint_canonical(buffer.name, kind)

    def _is_empty(self, name: str) -> bool:
        for entity in self.residents(name):
            if isinstance(entity, FieldDefinition) or not entity.kind.is_root:
                return False
        return True

    def _repoint_canonical(self, name: str, kind: FieldKind) -> None:
        """Hand canonical status for ``kind`` to wherever the first of its fields from ``name`` went."""
        if not kind.is_root:
            raise InternalConsistencyError(f"Unknown operation kind '{kind.value}'")

        successor = next(
            (
                field.source
                for field in self.fields
                if field.kind is kind and self.origin_of(field) == name and field.source not in (None, name)
            ),
            None,
        )
        if successor is None:
            del self.canonical[kind]
            logger.debug("No canonical %s buffer is left", kind.value)
        else:
            self.canonical[kind] = successor
            logger.info("%s is now the canonical %s buffer", successor, kind.value)
