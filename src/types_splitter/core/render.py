"""Text of synthesized buffers."""

from types_splitter.core.shift import normalize_blank_lines
from types_splitter.models import TYPE_NAME_BY_ROOT_KIND, Definition, FieldDefinition, FieldKind

ROOT_KIND_ORDER = (FieldKind.QUERY, FieldKind.MUTATION, FieldKind.SUBSCRIPTION)


def render_root_block(kind: FieldKind, fields: list[FieldDefinition], canonical: bool) -> str:
    keyword = "type" if canonical else "extend type"
    body = "\n".join(field.content for field in fields)
    return f"{keyword} {TYPE_NAME_BY_ROOT_KIND[kind]} {{\n{body}\n}}"


def render_root_extension(fields: list[FieldDefinition], canonical_kinds: set[FieldKind]) -> str:
    """One block per operation kind, in Query, Mutation, Subscription order.

    A block is a plain type declaration when the buffer is canonical for its kind, otherwise an extension.
    """
    blocks = []
    for kind in ROOT_KIND_ORDER:
        kind_fields = [field for field in fields if field.kind is kind]
        if kind_fields:
            blocks.append(render_root_block(kind, kind_fields, kind in canonical_kinds))
    return normalize_blank_lines("\n\n".join(blocks))


def render_objects(definitions: list[Definition]) -> str:
    return normalize_blank_lines("\n\n".join(definition.content for definition in definitions))
