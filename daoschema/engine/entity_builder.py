# daoschema/engine/entity_builder.py
from __future__ import annotations
import logging

from daoschema.engine.errors import DuplicatePropertyError, MissingNameError, SchemaCompileError
from daoschema.engine.graph import Entity, Property, Schema
from daoschema.engine.meta_models import PropertyDecl, TableDecl
from daoschema.engine.type_mapping import map_type

logger = logging.getLogger(__name__)


def add_property(entity: Entity, decl: PropertyDecl) -> Property:
    """
    Add one declared column to `entity`:
      - type token resolved via map_type (UnknownTypeError is fatal)
      - mandatory -> NOT NULL, indexed -> index
    """
    try:
        scalar = map_type(decl.type)
    except SchemaCompileError as e:
        e.declaration = e.declaration or f"{entity.name}.{decl.name}"
        raise
    if not decl.name:
        raise MissingNameError("Property declaration has no name", declaration=f"{entity.name}.<unnamed>")
    if entity.has_property(decl.name):
        raise DuplicatePropertyError(
            f"Duplicate property '{decl.name}' on table '{entity.name}'",
            declaration=f"{entity.name}.{decl.name}",
        )

    ref = entity.add_property(decl.name, scalar, not_null=decl.mandatory, indexed=decl.indexed)
    return entity.properties[ref.index]


def add_entity(schema: Schema, decl: TableDecl) -> Entity:
    if not decl.name:
        raise MissingNameError("Table declaration has no name", declaration=decl.model_dump())

    try:
        entity = schema.add_entity(decl.name)
    except SchemaCompileError as e:
        e.declaration = decl.name
        raise
    entity.add_id_property()

    for prop in decl.properties:
        add_property(entity, prop)

    logger.debug("Entity %s: %d properties", entity.name, len(entity.properties))
    return entity
