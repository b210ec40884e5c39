# daoschema/core/ports.py
from __future__ import annotations
from pathlib import Path
from typing import List, Protocol

from daoschema.engine.graph import Schema

class SchemaLoader(Protocol):
    def load(self) -> dict: ...

class CodeGenerator(Protocol):
    """Emits persistence-layer sources for a compiled entity graph into output_dir."""
    def generate(self, schema: Schema, output_dir: Path) -> List[Path]: ...
