# daoschema/engine/graph.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from daoschema.engine.errors import DuplicateEntityError, UnresolvedReferenceError
from daoschema.engine.type_mapping import ScalarType

ID_PROPERTY = "id"


@dataclass
class Property:
    name: str
    scalar_type: ScalarType
    primary_key: bool = False
    auto_increment: bool = False
    not_null: bool = False
    indexed: bool = False
    synthetic: bool = False          # foreign key added by a relationship
    references: Optional[str] = None  # entity whose id a synthetic key points at


@dataclass(frozen=True)
class PropertyRef:
    """A property addressed by owning entity and position (names may repeat)."""
    entity: str
    index: int
    name: str


@dataclass
class ToOneLink:
    name: str
    target: str
    fk: Optional[PropertyRef] = None


@dataclass
class ToManyLink:
    name: str
    target: str
    fk: PropertyRef


@dataclass
class Entity:
    name: str
    properties: List[Property] = field(default_factory=list)
    to_one: List[ToOneLink] = field(default_factory=list)
    to_many: List[ToManyLink] = field(default_factory=list)
    has_keep_sections: bool = True

    @property
    def table_name(self) -> str:
        return self.name

    def add_property(self, name: str, scalar_type: ScalarType, **flags: Any) -> PropertyRef:
        self.properties.append(Property(name=name, scalar_type=scalar_type, **flags))
        return PropertyRef(self.name, len(self.properties) - 1, name)

    def add_id_property(self) -> PropertyRef:
        return self.add_property(
            ID_PROPERTY, ScalarType.LONG, primary_key=True, auto_increment=True, not_null=True
        )

    def has_property(self, name: str) -> bool:
        return any(p.name == name for p in self.properties)

    def add_to_one(self, target: "Entity", fk: Optional[PropertyRef], name: Optional[str] = None) -> ToOneLink:
        link = ToOneLink(name=name or default_link_name(target.name), target=target.name, fk=fk)
        self.to_one.append(link)
        return link

    def add_to_many(self, target: "Entity", fk: PropertyRef, name: str) -> ToManyLink:
        link = ToManyLink(name=name, target=target.name, fk=fk)
        self.to_many.append(link)
        return link


def default_link_name(entity_name: str) -> str:
    """Accessor name for an unnamed to-one link: target name with a lower-case first letter."""
    return entity_name[:1].lower() + entity_name[1:]


@dataclass
class Schema:
    package_name: str = "db"
    version: int = 1
    format_version: int = 2
    entities: List[Entity] = field(default_factory=list)
    warnings: List[UnresolvedReferenceError] = field(default_factory=list)

    def add_entity(self, name: str) -> Entity:
        if self.get_entity(name) is not None:
            raise DuplicateEntityError(f"Duplicate table name '{name}'")
        entity = Entity(name=name)
        self.entities.append(entity)
        return entity

    def get_entity(self, name: Optional[str]) -> Optional[Entity]:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def resolve(self, ref: PropertyRef) -> Property:
        entity = self.get_entity(ref.entity)
        if entity is None:
            raise KeyError(f"Entity {ref.entity} not found")
        return entity.properties[ref.index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageName": self.package_name,
            "databaseVersion": self.version,
            "formatVersion": self.format_version,
            "entities": [
                {
                    "name": e.name,
                    "hasKeepSections": e.has_keep_sections,
                    "properties": [
                        {**asdict(p), "scalar_type": p.scalar_type.value} for p in e.properties
                    ],
                    "toOne": [asdict(link) for link in e.to_one],
                    "toMany": [asdict(link) for link in e.to_many],
                }
                for e in self.entities
            ],
        }
