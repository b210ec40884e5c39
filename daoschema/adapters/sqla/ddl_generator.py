# daoschema/adapters/sqla/ddl_generator.py
from __future__ import annotations
import io
import json
import logging
from pathlib import Path
from typing import Dict, List

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, MetaData, Table
from sqlalchemy.dialects import mssql, postgresql, sqlite
from sqlalchemy.schema import AddConstraint, CreateIndex, CreateTable, sort_tables_and_constraints

from daoschema.engine.graph import ID_PROPERTY, Entity, Property, Schema
from daoschema.engine.type_mapping import sqlalchemy_type

logger = logging.getLogger(__name__)

DIALECTS = {
    "sqlite": sqlite.dialect,
    "postgres": postgresql.dialect,
    "mssql": mssql.dialect,
}

DDL_FILE = "schema.sql"
MANIFEST_FILE = "model.json"


def _column_for(prop: Property, dialect: str) -> Column:
    if prop.primary_key:
        # sqlite only auto-assigns ids for INTEGER PRIMARY KEY
        return Column(
            prop.name,
            BigInteger().with_variant(Integer(), "sqlite"),
            primary_key=True,
            autoincrement=prop.auto_increment,
        )

    args = []
    if prop.references:
        args.append(ForeignKey(f"{prop.references}.{ID_PROPERTY}"))
    return Column(
        prop.name,
        sqlalchemy_type(prop.scalar_type, dialect=dialect),
        *args,
        nullable=not prop.not_null,
        index=prop.indexed,
    )


def _table_for(entity: Entity, metadata: MetaData, dialect: str) -> Table:
    columns: List[Column] = []
    seen = set()
    for prop in entity.properties:
        if prop.name in seen:
            logger.warning(
                "Table %s: column %s declared more than once; emitting the first only",
                entity.table_name, prop.name,
            )
            continue
        seen.add(prop.name)
        columns.append(_column_for(prop, dialect))
    return Table(entity.table_name, metadata, *columns)


def build_metadata(schema: Schema, dialect: str = "generic") -> MetaData:
    """Build one SQLAlchemy Table per entity. Returns the populated MetaData."""
    metadata = MetaData()
    for entity in schema.entities:
        _table_for(entity, metadata, dialect)
    return metadata


def render_ddl(schema: Schema, dialect: str = "sqlite") -> str:
    factory = DIALECTS.get((dialect or "").lower())
    if factory is None:
        raise ValueError(f"Unknown dialect '{dialect}'. Use one of: {' | '.join(DIALECTS)}")
    di = factory()

    metadata = build_metadata(schema, dialect=dialect)
    buf = io.StringIO()
    buf.write(f"-- package: {schema.package_name}, database version: {schema.version}\n\n")

    def emit(ddl) -> None:
        buf.write(str(ddl.compile(dialect=di)).strip())
        buf.write(";\n\n")

    # tables in dependency order; keys closing a reference cycle come back with table=None
    tables = [metadata.tables[e.table_name] for e in schema.entities]
    deferred = []
    for table, fkcs in sort_tables_and_constraints(tables):
        if table is None:
            deferred.extend(fkcs)
            continue
        # sqlite cannot ALTER TABLE to add a foreign key; it checks them at write time only
        inline = None if di.name == "sqlite" else fkcs
        emit(CreateTable(table, include_foreign_key_constraints=inline))
        for index in sorted(table.indexes, key=lambda i: i.name or ""):
            emit(CreateIndex(index))

    if di.name != "sqlite":
        for fkc in deferred:
            emit(AddConstraint(fkc))
    return buf.getvalue()


class SqlAlchemyGenerator:
    """
    Default code generator: writes CREATE TABLE DDL (schema.sql) and the
    compiled entity graph (model.json) into output_dir.
    """
    def __init__(self, dialect: str = "sqlite") -> None:
        if (dialect or "").lower() not in DIALECTS:
            raise ValueError(f"Unknown dialect '{dialect}'. Use one of: {' | '.join(DIALECTS)}")
        self.dialect = dialect.lower()

    def generate(self, schema: Schema, output_dir: Path) -> List[Path]:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        ddl_path = output_dir / DDL_FILE
        ddl_path.write_text(render_ddl(schema, dialect=self.dialect), encoding="utf-8")

        manifest: Dict = schema.to_dict()
        manifest_path = output_dir / MANIFEST_FILE
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")

        logger.info("Generated %s and %s for %d entities", ddl_path, manifest_path, len(schema.entities))
        return [ddl_path, manifest_path]
