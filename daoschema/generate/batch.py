# daoschema/generate/batch.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from daoschema.core.ports import CodeGenerator, SchemaLoader
from daoschema.engine.compiler import compile_schema
from daoschema.engine.errors import MissingOutputTargetError
from daoschema.engine.graph import Schema
from daoschema.generate.loader import JsonSchemaLoader

logger = logging.getLogger(__name__)

LoaderFactory = Callable[[Path], SchemaLoader]


@dataclass
class BatchResult:
    directory: Path
    ok: bool
    written: List[Path] = field(default_factory=list)
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def compile_file(
    schema_path: Path,
    format_version: Optional[int] = None,
    loader: Optional[SchemaLoader] = None,
) -> Schema:
    raw = (loader or JsonSchemaLoader(schema_path)).load()
    return compile_schema(raw, format_version=format_version, source=str(schema_path))


def output_dir_for(schema_path: Path, raw: dict) -> Path:
    """output_dir is required in batch mode and is relative to the schema file's directory."""
    target = raw.get("output_dir")
    if not target or not isinstance(target, str):
        raise MissingOutputTargetError("Schema has no 'output_dir'", source=str(schema_path))
    out = Path(target)
    return out if out.is_absolute() else (schema_path.parent / out)


def generate_directory(
    directory: Path,
    generator: CodeGenerator,
    *,
    schema_file: str = "schema.json",
    format_version: Optional[int] = None,
    loader_factory: LoaderFactory = JsonSchemaLoader,
) -> BatchResult:
    schema_path = Path(directory) / schema_file
    raw = loader_factory(schema_path).load()
    out_dir = output_dir_for(schema_path, raw)
    schema = compile_schema(raw, format_version=format_version, source=str(schema_path))
    written = generator.generate(schema, out_dir)
    return BatchResult(
        directory=Path(directory),
        ok=True,
        written=written,
        warnings=[str(w) for w in schema.warnings],
    )


def run_batch(
    directories: Iterable[Path],
    generator: CodeGenerator,
    *,
    schema_file: str = "schema.json",
    format_version: Optional[int] = None,
    loader_factory: LoaderFactory = JsonSchemaLoader,
) -> List[BatchResult]:
    """
    Compile + generate each directory independently.
    A failure is logged and recorded on its own result; remaining directories still run.
    """
    results: List[BatchResult] = []
    for directory in directories:
        directory = Path(directory)
        try:
            results.append(
                generate_directory(
                    directory,
                    generator,
                    schema_file=schema_file,
                    format_version=format_version,
                    loader_factory=loader_factory,
                )
            )
        except Exception as e:
            logger.exception("Generation failed for %s", directory)
            results.append(BatchResult(directory=directory, ok=False, error=str(e)))
    return results
