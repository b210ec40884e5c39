# daoschema/cli.py
import logging
from pathlib import Path
from typing import List, Optional

import typer

from daoschema.adapters.sqla.ddl_generator import DIALECTS, SqlAlchemyGenerator, render_ddl
from daoschema.engine.errors import SchemaCompileError
from daoschema.engine.settings import get_settings
from daoschema.generate.batch import compile_file, run_batch

settings = get_settings()

app = typer.Typer(help="Compile schema.json descriptions into entity graphs and persistence-layer sources")

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

# ---------------------------
# Core utilities
# ---------------------------
def _require_dialect(dialect: str) -> str:
    if dialect.lower() not in DIALECTS:
        typer.echo(f"❌ Unknown dialect. Use one of: {' | '.join(DIALECTS)}")
        raise typer.Exit(code=2)
    return dialect.lower()

# ---------------------------
# Commands
# ---------------------------
@app.command(help="Generate sources for every DIRECTORY containing a schema.json (batch mode).")
def generate(
    directories: List[Path] = typer.Argument(..., help="Directories holding a schema file"),
    dialect: str = typer.Option(settings.DIALECT, help="Target dialect: sqlite | postgres | mssql"),
    format_version: Optional[int] = typer.Option(None, "--format-version", help="Override the schema format (1 | 2)"),
    schema_file: str = typer.Option(settings.SCHEMA_FILE, help="Schema file name inside each directory"),
):
    generator = SqlAlchemyGenerator(_require_dialect(dialect))
    results = run_batch(directories, generator, schema_file=schema_file, format_version=format_version)

    for r in results:
        if r.ok:
            typer.echo(f"✅ {r.directory}: wrote {', '.join(str(p) for p in r.written)}")
            for w in r.warnings:
                typer.echo(f"   ⚠️  {w}")
        else:
            typer.echo(f"❌ {r.directory}: {r.error}")

    if not all(r.ok for r in results):
        raise typer.Exit(code=1)

@app.command(help="Compile each DIRECTORY's schema without generating anything.")
def validate(
    directories: List[Path] = typer.Argument(...),
    format_version: Optional[int] = typer.Option(None, "--format-version"),
    schema_file: str = typer.Option(settings.SCHEMA_FILE),
):
    failed = False
    for directory in directories:
        try:
            schema = compile_file(directory / schema_file, format_version=format_version)
        except SchemaCompileError as e:
            typer.echo(f"❌ {e}")
            failed = True
            continue
        typer.echo(
            f"✅ {directory}: {len(schema.entities)} entities, "
            f"{len(schema.warnings)} skipped relationships"
        )
    if failed:
        raise typer.Exit(code=1)

@app.command(help="Export CREATE TABLE DDL for a single schema file.")
def export_ddl(
    schema: Path = typer.Argument(Path("schema.json"), help="Schema file"),
    dialect: str = typer.Option(settings.DIALECT, help="Target dialect: sqlite | postgres | mssql"),
    out: Path = typer.Option(Path("schema.sql"), help="Output .sql file path"),
    format_version: Optional[int] = typer.Option(None, "--format-version"),
):
    dialect = _require_dialect(dialect)
    try:
        compiled = compile_file(schema, format_version=format_version)
    except SchemaCompileError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)

    out.write_text(render_ddl(compiled, dialect=dialect), encoding="utf-8")
    typer.echo(f"✅ DDL written to {out} (dialect={dialect})")

if __name__ == "__main__":
    app()
