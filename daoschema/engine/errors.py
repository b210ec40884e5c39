# daoschema/engine/errors.py
from __future__ import annotations
from typing import Any, Optional


class SchemaCompileError(Exception):
    """
    Base for every error raised while turning a schema document into an entity graph.

    `source` is the schema file (when known) and `declaration` the offending
    table/property/relationship declaration, so a report can point at the cause.
    """

    def __init__(self, message: str, *, declaration: Any = None, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.declaration = declaration
        self.source = source

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"{self.source}: ")
        parts.append(self.message)
        if self.declaration is not None:
            parts.append(f" (in {self.declaration!r})")
        return "".join(parts)


class MalformedSchemaError(SchemaCompileError):
    pass


class MissingNameError(MalformedSchemaError):
    pass


class DuplicateEntityError(MalformedSchemaError):
    pass


class DuplicatePropertyError(MalformedSchemaError):
    pass


class SchemaFileError(MalformedSchemaError):
    """Schema file missing, unreadable or not JSON."""


class UnknownTypeError(SchemaCompileError):
    pass


class UnknownRelationKindError(SchemaCompileError):
    pass


class UnresolvedReferenceError(SchemaCompileError):
    """Non-fatal: a relationship names a table that was never declared."""


class MissingOutputTargetError(SchemaCompileError):
    pass
