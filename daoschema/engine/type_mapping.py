# daoschema/engine/type_mapping.py
from __future__ import annotations
from enum import Enum
from typing import Any

from sqlalchemy import types
from sqlalchemy.dialects import postgresql

from daoschema.engine.errors import UnknownTypeError


class ScalarType(str, Enum):
    DATE = "date"
    DOUBLE = "double"
    FLOAT = "float"
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LONG = "long"
    BLOB = "blob"


def map_type(token: Any) -> ScalarType:
    """
    Map a declared property type token -> ScalarType.
    Matching ignores letter case ("String", "LONG", "blob" are all fine).
    """
    if not isinstance(token, str):
        raise UnknownTypeError(f"Property type must be a string, got {token!r}")
    try:
        return ScalarType(token.lower())
    except ValueError:
        allowed = ", ".join(t.value for t in ScalarType)
        raise UnknownTypeError(f"Unknown property type '{token}' (expected one of: {allowed})") from None


def sqlalchemy_type(scalar: ScalarType, *, dialect: str = "generic"):
    """
    Map ScalarType -> SQLAlchemy Column type.
    `dialect` should start with 'sqlite', 'postgres', 'mssql', or 'generic'.
    """
    d = (dialect or "generic").lower()

    if scalar is ScalarType.DATE:
        # date properties carry a time component
        return types.DateTime()

    if scalar is ScalarType.DOUBLE:
        if d.startswith("postgres"):
            return postgresql.DOUBLE_PRECISION()
        return types.Float(precision=53)

    if scalar is ScalarType.FLOAT:
        return types.Float()

    if scalar is ScalarType.STRING:
        return types.Text()

    if scalar is ScalarType.INTEGER:
        return types.Integer()

    if scalar is ScalarType.BOOLEAN:
        return types.Boolean()

    if scalar is ScalarType.LONG:
        return types.BigInteger()

    if scalar is ScalarType.BLOB:
        return types.LargeBinary()

    raise UnknownTypeError(f"No column type for {scalar!r}")
