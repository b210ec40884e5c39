# daoschema/engine/compiler.py
from __future__ import annotations
import logging
from typing import Any, Optional

from daoschema.engine.entity_builder import add_entity
from daoschema.engine.errors import MalformedSchemaError, SchemaCompileError
from daoschema.engine.graph import Schema
from daoschema.engine.meta_models import SchemaDocument, decode_schema
from daoschema.engine.relations import CURRENT_FORMAT, VOCABULARY, resolve_relationships

logger = logging.getLogger(__name__)


def compile_schema(
    raw: Any,
    *,
    format_version: Optional[int] = None,
    source: Optional[str] = None,
) -> Schema:
    """
    Compile a parsed schema document (dict or SchemaDocument) into an entity graph.

    Phases are strictly sequential: every table first, then every relationship,
    so relationships can always name any declared table. The first fatal error
    aborts and is re-raised with `source` attached.
    """
    try:
        doc: SchemaDocument = decode_schema(raw)
        if format_version is not None:
            fmt = format_version
        else:
            fmt = doc.formatVersion or CURRENT_FORMAT
        if fmt not in VOCABULARY:
            raise MalformedSchemaError(f"Unsupported format version {fmt!r}")

        schema = Schema(package_name=doc.packageName, version=doc.databaseVersion, format_version=fmt)

        for table in doc.tables:
            add_entity(schema, table)

        schema.warnings.extend(resolve_relationships(schema, doc.relationships))
    except SchemaCompileError as e:
        if source and not e.source:
            e.source = source
        raise

    for w in schema.warnings:
        w.source = w.source or source

    logger.info(
        "Compiled %s: %d entities, %d relationships (%d skipped), format=%d",
        source or "<schema>", len(schema.entities), len(doc.relationships), len(schema.warnings), fmt,
    )
    return schema
