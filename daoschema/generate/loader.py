# daoschema/generate/loader.py
import json
from pathlib import Path
from typing import Any

from jsonschema.exceptions import SchemaError, best_match
from jsonschema.validators import Draft7Validator

from daoschema.engine.errors import MalformedSchemaError, SchemaFileError

BUNDLED_SPEC = Path(__file__).resolve().parents[1] / "schema_definitions" / "daoSchema.json"


def _resolve_spec_path(spec_uri: Any, base_dir: Path) -> Path:
    """
    Resolve the JSON-Schema file from the document's $schema (relative to the
    schema file) with a fallback to the bundled spec.
    """
    if spec_uri is not None and not isinstance(spec_uri, str):
        raise MalformedSchemaError(f"'$schema' must be a string path, got {spec_uri!r}")
    if spec_uri and not spec_uri.startswith(("http://", "https://")):
        candidate = Path(spec_uri)
        if not candidate.is_absolute():
            candidate = base_dir / candidate
        if candidate.exists():
            return candidate
    return BUNDLED_SPEC


def validate_document(data: dict, spec_path: Path = BUNDLED_SPEC) -> None:
    try:
        spec = json.loads(spec_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SchemaFileError(f"Failed to read spec at {spec_path}: {e}") from e

    try:
        Draft7Validator.check_schema(spec)
    except SchemaError as e:
        raise SchemaFileError(f"Invalid JSON-Schema at {spec_path}: {e.message}") from e

    error = best_match(Draft7Validator(spec).iter_errors(data))
    if error is not None:
        where = "/".join(str(p) for p in error.absolute_path) or "<root>"
        raise MalformedSchemaError(f"Schema validation failed at '{where}': {error.message}")


def load_schema(path: str | Path = "schema.json") -> dict:
    schema_path = Path(path)
    if not schema_path.is_file():
        raise SchemaFileError(f"Schema file not found at {schema_path}", source=str(schema_path))

    try:
        data = json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaFileError(f"Could not read schema file: {e}", source=str(schema_path)) from e
    except json.JSONDecodeError as e:
        raise SchemaFileError(
            f"Invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}", source=str(schema_path)
        ) from e

    if not isinstance(data, dict):
        raise MalformedSchemaError("Schema root must be a JSON object", source=str(schema_path))

    try:
        validate_document(data, _resolve_spec_path(data.get("$schema"), schema_path.parent))
    except MalformedSchemaError as e:
        e.source = str(schema_path)
        raise

    return data


class JsonSchemaLoader:
    """Loads a schema.json validated against the bundled daoSchema.json."""
    def __init__(self, path: str | Path = "schema.json") -> None:
        self.path = Path(path)

    def load(self) -> dict:
        return load_schema(self.path)
