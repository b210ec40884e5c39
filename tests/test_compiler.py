import pytest

from daoschema.engine.compiler import compile_schema
from daoschema.engine.errors import MalformedSchemaError, UnknownRelationKindError, UnknownTypeError
from daoschema.engine.type_mapping import ScalarType


def _props(entity):
    return [(p.name, p.scalar_type, p.not_null, p.primary_key) for p in entity.properties]


def test_end_to_end_user_posts(blog_schema):
    schema = compile_schema(blog_schema)
    user, post = schema.get_entity("User"), schema.get_entity("Post")

    assert schema.package_name == "com.example.db"
    assert schema.version == 3
    assert _props(post) == [
        ("id", ScalarType.LONG, True, True),
        ("title", ScalarType.STRING, False, False),
        ("parentId", ScalarType.LONG, True, False),
    ]
    assert _props(user) == [
        ("id", ScalarType.LONG, True, True),
        ("name", ScalarType.STRING, True, False),
    ]
    assert [(l.name, l.target) for l in user.to_many] == [("childsPost", "Post")]
    assert [(l.name, l.target) for l in post.to_one] == [("user", "User")]
    assert schema.warnings == []


def test_defaults():
    schema = compile_schema({})
    assert schema.package_name == "db"
    assert schema.version == 1
    assert schema.format_version == 2
    assert schema.entities == []


def test_null_fields_fall_back_to_defaults():
    schema = compile_schema({"packageName": None, "databaseVersion": None, "tables": None, "relationships": None})
    assert (schema.package_name, schema.version, schema.entities) == ("db", 1, [])


def test_zero_relationships_preserves_declaration_order():
    doc = {
        "tables": [
            {"name": "B", "properties": [
                {"name": "z", "type": "blob"},
                {"name": "a", "type": "boolean", "indexed": True},
                {"name": "m", "type": "float"},
            ]},
            {"name": "A", "properties": [{"name": "when", "type": "DATE"}]},
        ]
    }
    schema = compile_schema(doc)

    assert [e.name for e in schema.entities] == ["B", "A"]
    for table, entity in zip(doc["tables"], schema.entities):
        assert [p.name for p in entity.properties] == ["id"] + [p["name"] for p in table["properties"]]
        assert entity.to_one == [] and entity.to_many == []


def test_non_object_entries_are_ignored():
    schema = compile_schema({"tables": [{"name": "T", "properties": ["junk", {"name": "a", "type": "long"}]}, 42]})
    assert [e.name for e in schema.entities] == ["T"]
    assert [p.name for p in schema.entities[0].properties] == ["id", "a"]


def test_relationships_can_reference_tables_declared_later():
    doc = {
        "tables": [{"name": "Child"}, {"name": "Parent"}],
        "relationships": [{"type": "to_many", "left_table": "Parent", "right_table": "Child"}],
    }
    schema = compile_schema(doc)
    assert schema.get_entity("Parent").to_many[0].target == "Child"


def test_version_must_be_positive():
    with pytest.raises(MalformedSchemaError, match="databaseVersion"):
        compile_schema({"databaseVersion": 0})


def test_root_must_be_object():
    with pytest.raises(MalformedSchemaError):
        compile_schema([])


def test_fatal_error_carries_source():
    with pytest.raises(UnknownTypeError) as exc:
        compile_schema(
            {"tables": [{"name": "T", "properties": [{"name": "x", "type": "uuid"}]}]},
            source="app/schema.json",
        )
    assert exc.value.source == "app/schema.json"
    assert str(exc.value).startswith("app/schema.json: ")
    assert "T.x" in str(exc.value)


def test_unknown_relation_kind_aborts_compile():
    doc = {
        "tables": [{"name": "A"}, {"name": "B"}],
        "relationships": [{"type": "belongs_to", "left_table": "A", "right_table": "B"}],
    }
    with pytest.raises(UnknownRelationKindError):
        compile_schema(doc)


def test_unresolved_reference_is_recorded_as_warning():
    doc = {
        "tables": [{"name": "A"}],
        "relationships": [{"name": "b", "type": "has_one", "left_table": "A", "right_table": "B"}],
    }
    schema = compile_schema(doc, source="s.json")
    assert len(schema.warnings) == 1
    assert schema.warnings[0].source == "s.json"


def test_format_version_from_document_and_override():
    doc = {
        "formatVersion": 1,
        "tables": [{"name": "A"}, {"name": "B"}],
        "relationships": [{"type": "has_one", "left_table": "A", "right_table": "B"}],
    }
    legacy = compile_schema(doc)
    assert legacy.format_version == 1
    assert [p.name for p in legacy.get_entity("B").properties] == ["id", "AId"]

    with pytest.raises(MalformedSchemaError, match="requires a 'name'"):
        compile_schema(doc, format_version=2)


def test_unsupported_format_version():
    with pytest.raises(MalformedSchemaError):
        compile_schema({"formatVersion": 3})
    with pytest.raises(MalformedSchemaError, match="Unsupported format version"):
        compile_schema({}, format_version=7)


def test_to_dict_manifest(blog_schema):
    manifest = compile_schema(blog_schema).to_dict()
    post = manifest["entities"][1]
    assert post["name"] == "Post"
    assert post["properties"][2]["name"] == "parentId"
    assert post["properties"][2]["scalar_type"] == "long"
    assert post["toOne"][0]["fk"] == {"entity": "Post", "index": 2, "name": "parentId"}
    assert manifest["entities"][0]["toMany"][0]["name"] == "childsPost"


def test_zero_format_override_is_rejected():
    with pytest.raises(MalformedSchemaError, match="Unsupported format version 0"):
        compile_schema({"formatVersion": 2}, format_version=0)
