import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from types_splitter.config import SplitterConfig
from types_splitter.core.document import Document, Observer
from types_splitter.core.ports.parser import SchemaParser
from types_splitter.core.routing import RoutingTable
from types_splitter.core.schema import load_document
from types_splitter.errors import ConfigurationError
from types_splitter.models import Definition, FieldDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedMove:
    source: str
    name: str
    kind: str
    destination: str
    entity: Definition | FieldDefinition = field(compare=False, repr=False)

    @property
    def is_field(self) -> bool:
        return isinstance(self.entity, FieldDefinition)


@dataclass
class RelocationPlan:
    field_moves: list[PlannedMove] = field(default_factory=list)
    type_moves: list[PlannedMove] = field(default_factory=list)
    skipped: list[PlannedMove] = field(default_factory=list)

    @property
    def moves(self) -> list[PlannedMove]:
        return self.field_moves + self.type_moves


@dataclass
class RelocationResult:
    outputs: dict[str, str]
    created: list[str]
    removed: list[str]
    moves: list[PlannedMove]
    skipped: list[PlannedMove]


def field_destination(source: str, prefix: str) -> str:
    """``racing`` routes fields of ``schema/root.graphql`` to ``schema/racing.root.graphql``."""
    path = PurePosixPath(source)
    return (path.parent / f"{prefix}.{path.name}").as_posix()


def type_destination(source: str, prefix: str) -> str:
    """``racing_race`` routes types of ``schema/root.graphql`` to ``schema/racing_race.graphql``."""
    path = PurePosixPath(source)
    return (path.parent / f"{prefix}{path.suffix}").as_posix()


def plan_relocations(document: Document, routing: RoutingTable) -> RelocationPlan:
    """Route every root field and relocatable declaration without touching any buffer."""
    plan = RelocationPlan()
    originals = [name for name, buffer in document.buffers.items() if buffer.is_original]

    for source in originals:
        for root_field in document.fields:
            if root_field.source != source or not root_field.kind.is_root:
                continue
            prefix = routing.resolve_field(root_field.name)
            if prefix is None:
                continue
            parent = document.parent_of(root_field)
            move = PlannedMove(
                source=source,
                name=f"{parent.name}.{root_field.name}",
                kind=root_field.kind.value,
                destination=field_destination(source, prefix),
                entity=root_field,
            )
            _add_move(plan, plan.field_moves, move)

    for source in originals:
        for definition in document.definitions:
            if definition.source != source or not definition.kind.is_relocatable:
                continue
            prefix = routing.resolve_type(definition.name)
            if prefix is None:
                continue
            move = PlannedMove(
                source=source,
                name=definition.name,
                kind=definition.kind.value,
                destination=type_destination(source, prefix),
                entity=definition,
            )
            _add_move(plan, plan.type_moves, move)

    _check_destinations(plan, set(originals))
    return plan


def relocate(document: Document, routing: RoutingTable) -> RelocationResult:
    plan = plan_relocations(document, routing)

    for move in plan.field_moves:
        document.move_field(move.entity, move.destination)
    for move in plan.type_moves:
        document.move_definition(move.entity, move.destination)

    for name, buffer in document.buffers.items():
        if buffer.is_original:
            document.verify(name)

    logger.info(
        "Relocated %d entities into %d new files, removed %d files",
        len(plan.moves),
        len(document.created),
        len(document.dropped),
    )
    return RelocationResult(
        outputs=document.output(),
        created=sorted(document.created),
        removed=sorted(document.dropped),
        moves=plan.moves,
        skipped=plan.skipped,
    )


def split_schemas(
    sources: Mapping[str, str],
    config: SplitterConfig,
    parser: SchemaParser | None = None,
    observer: Observer | None = None,
) -> RelocationResult:
    """Load ``sources``, route them with ``config`` and return the resulting files."""
    routing = RoutingTable.from_config(config)
    document = load_document(sources, parser=parser, observer=observer)
    return relocate(document, routing)


def _add_move(plan: RelocationPlan, moves: list[PlannedMove], move: PlannedMove) -> None:
    if move.destination == move.source:
        logger.info("%s already lives in %s, leaving it in place", move.name, move.source)
        plan.skipped.append(move)
        return
    moves.append(move)


def _check_destinations(plan: RelocationPlan, originals: set[str]) -> None:
    for move in plan.moves:
        if move.destination in originals:
            raise ConfigurationError(f"{move.name} would be moved into the existing schema file {move.destination}")

    shared = {move.destination for move in plan.field_moves} & {move.destination for move in plan.type_moves}
    if shared:
        raise ConfigurationError(f"{sorted(shared)[0]} would receive both operation fields and type declarations")
