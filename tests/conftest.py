import json
from pathlib import Path

import pytest


@pytest.fixture
def blog_schema() -> dict:
    return {
        "packageName": "com.example.db",
        "databaseVersion": 3,
        "tables": [
            {"name": "User", "properties": [{"name": "name", "type": "string", "mandatory": True}]},
            {"name": "Post", "properties": [{"name": "title", "type": "string"}]},
        ],
        "relationships": [
            {"type": "to_many", "left_table": "User", "right_table": "Post", "mandatory": True},
        ],
    }


@pytest.fixture
def write_schema(tmp_path):
    """Write a schema dict as <tmp>/<subdir>/schema.json and return the directory."""
    def _write(doc: dict, subdir: str = "app") -> Path:
        d = tmp_path / subdir
        d.mkdir(parents=True, exist_ok=True)
        (d / "schema.json").write_text(json.dumps(doc), encoding="utf-8")
        return d
    return _write
