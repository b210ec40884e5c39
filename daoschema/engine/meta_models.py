from __future__ import annotations
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field, ValidationError, field_validator

from daoschema.engine.errors import MalformedSchemaError


def _objects_only(value: Any) -> Any:
    # null arrays decode as empty; non-object entries are ignored
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return value


def _false_if_null(value: Any) -> Any:
    return False if value is None else value


Flag = Annotated[bool, BeforeValidator(_false_if_null)]


class PropertyDecl(BaseModel):
    name: Optional[str] = None
    type: Any = None
    mandatory: Flag = False
    indexed: Flag = False


class TableDecl(BaseModel):
    name: Optional[str] = None
    properties: Annotated[List[PropertyDecl], BeforeValidator(_objects_only)] = Field(default_factory=list)


class RelationshipDecl(BaseModel):
    name: Optional[str] = None
    left_table: Optional[str] = None
    right_table: Optional[str] = None
    type: Any = None
    mandatory: Flag = False


class SchemaDocument(BaseModel):
    packageName: str = "db"
    databaseVersion: int = Field(default=1, ge=1)
    formatVersion: Optional[Literal[1, 2]] = None
    output_dir: Optional[str] = None
    tables: Annotated[List[TableDecl], BeforeValidator(_objects_only)] = Field(default_factory=list)
    relationships: Annotated[List[RelationshipDecl], BeforeValidator(_objects_only)] = Field(default_factory=list)

    @field_validator("packageName", mode="before")
    @classmethod
    def _default_package(cls, v: Any) -> Any:
        return "db" if v is None else v

    @field_validator("databaseVersion", mode="before")
    @classmethod
    def _default_version(cls, v: Any) -> Any:
        return 1 if v is None else v


def decode_schema(raw: Any) -> SchemaDocument:
    """Decode a parsed JSON value into a SchemaDocument (MalformedSchemaError on shape errors)."""
    if isinstance(raw, SchemaDocument):
        return raw
    if not isinstance(raw, dict):
        raise MalformedSchemaError(f"Schema root must be a JSON object, got {type(raw).__name__}")
    try:
        return SchemaDocument.model_validate(raw)
    except ValidationError as e:
        err = e.errors()[0]
        loc = "/".join(str(p) for p in err.get("loc", ()))
        raise MalformedSchemaError(f"Invalid schema at '{loc}': {err.get('msg')}") from e
