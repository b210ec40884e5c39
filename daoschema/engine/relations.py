# daoschema/engine/relations.py
#
# Relationship directives -> foreign-key properties + navigation links.
#
#   to_many  L -> R : R.parentId, R --to-one--> L, L --to-many "childs<R>"--> R
#   has_one  (format 1) : R.<L>Id,           L --to-one--> R
#   has_one  (format 2) : L.<name>Id,        L --to-one "<name>"--> R
#   has_many (format 2) : no key,            L --to-one "<name>"--> R
#
# Directives are applied in declaration order and never deduplicated.
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Iterable, List

from daoschema.engine.errors import (
    MalformedSchemaError,
    UnknownRelationKindError,
    UnresolvedReferenceError,
)
from daoschema.engine.graph import Entity, Schema
from daoschema.engine.meta_models import RelationshipDecl
from daoschema.engine.type_mapping import ScalarType

logger = logging.getLogger(__name__)

LEGACY_FORMAT = 1
CURRENT_FORMAT = 2

PARENT_KEY = "parentId"
CHILDREN_PREFIX = "childs"


class RelationKind(str, Enum):
    TO_MANY = "to_many"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"


VOCABULARY = {
    LEGACY_FORMAT: (RelationKind.TO_MANY, RelationKind.HAS_ONE),
    CURRENT_FORMAT: (RelationKind.TO_MANY, RelationKind.HAS_ONE, RelationKind.HAS_MANY),
}


def parse_relation_kind(token: Any, format_version: int = CURRENT_FORMAT) -> RelationKind:
    allowed = VOCABULARY[format_version]
    kind = None
    if isinstance(token, str):
        try:
            kind = RelationKind(token.lower())
        except ValueError:
            kind = None
    if kind is None or kind not in allowed:
        raise UnknownRelationKindError(
            f"Unknown relationship type {token!r} for format {format_version} "
            f"(expected one of: {', '.join(k.value for k in allowed)})"
        )
    return kind


def _needs_name(kind: RelationKind, format_version: int) -> bool:
    if kind is RelationKind.HAS_MANY:
        return True
    return kind is RelationKind.HAS_ONE and format_version >= CURRENT_FORMAT


def _to_many(left: Entity, right: Entity, rel: RelationshipDecl) -> None:
    fk = right.add_property(
        PARENT_KEY, ScalarType.LONG, not_null=rel.mandatory, synthetic=True, references=left.name
    )
    right.add_to_one(left, fk)
    left.add_to_many(right, fk, CHILDREN_PREFIX + right.name)


def _has_one_legacy(left: Entity, right: Entity, rel: RelationshipDecl) -> None:
    fk = right.add_property(
        f"{left.name}Id", ScalarType.LONG, not_null=rel.mandatory, synthetic=True, references=left.name
    )
    left.add_to_one(right, fk)


def _has_one(left: Entity, right: Entity, rel: RelationshipDecl) -> None:
    fk = left.add_property(
        f"{rel.name}Id", ScalarType.LONG, not_null=rel.mandatory, synthetic=True, references=right.name
    )
    left.add_to_one(right, fk, name=rel.name)


def _has_many(left: Entity, right: Entity, rel: RelationshipDecl) -> None:
    left.add_to_one(right, None, name=rel.name)


def apply_relationship(schema: Schema, rel: RelationshipDecl) -> None:
    """
    Apply one directive to the graph.
    Raises UnresolvedReferenceError (caller decides to skip) when a table is missing.
    """
    fmt = schema.format_version
    try:
        kind = parse_relation_kind(rel.type, fmt)
    except UnknownRelationKindError as e:
        e.declaration = rel.model_dump()
        raise

    if not rel.left_table or not rel.right_table:
        raise MalformedSchemaError(
            "Relationship requires both 'left_table' and 'right_table'", declaration=rel.model_dump()
        )
    if _needs_name(kind, fmt) and not rel.name:
        raise MalformedSchemaError(
            f"Relationship of type '{kind.value}' requires a 'name'", declaration=rel.model_dump()
        )

    left = schema.get_entity(rel.left_table)
    right = schema.get_entity(rel.right_table)
    missing = [n for n, e in ((rel.left_table, left), (rel.right_table, right)) if e is None]
    if missing:
        raise UnresolvedReferenceError(
            f"Relationship references unknown table(s): {', '.join(missing)}", declaration=rel.model_dump()
        )

    if kind is RelationKind.TO_MANY:
        _to_many(left, right, rel)
    elif kind is RelationKind.HAS_ONE:
        if fmt == LEGACY_FORMAT:
            _has_one_legacy(left, right, rel)
        else:
            _has_one(left, right, rel)
    elif kind is RelationKind.HAS_MANY:
        _has_many(left, right, rel)
    else:
        raise UnknownRelationKindError(f"Unhandled relationship type {kind!r}", declaration=rel.model_dump())


def resolve_relationships(schema: Schema, relationships: Iterable[RelationshipDecl]) -> List[UnresolvedReferenceError]:
    """
    Apply directives in order. Unresolved table names are skipped (logged + returned);
    every other error aborts.
    """
    skipped: List[UnresolvedReferenceError] = []
    for idx, rel in enumerate(relationships):
        try:
            apply_relationship(schema, rel)
        except UnresolvedReferenceError as e:
            logger.warning("Skipping relationship #%d: %s", idx, e)
            skipped.append(e)
    return skipped
