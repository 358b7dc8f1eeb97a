""" Schema facts: types, fields, relationships, field sets

These are immutable descriptions of the object schema. Builders only read them.
"""

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from functools import cached_property
from typing import Optional


@dataclass(frozen=True)
class FieldInfo:
    """ A field of an object type

    A scalar field only has a name.
    A reference field points to one or more other types, and has a relationship name
    that is used in dotted paths to traverse to the referenced object.
    """
    # Canonical field name. Example: "AccountId"
    name: str
    # The type this field belongs to. Example: "Contact"
    type_name: str
    # Types this field may point to. Empty for scalar fields. Order matters: the first one is the default
    reference_to: tuple[str, ...] = ()
    # Name used to traverse the reference. Example: "Account"
    relationship_name: Optional[str] = None

    @property
    def is_reference(self) -> bool:
        return bool(self.reference_to)

    @property
    def is_polymorphic(self) -> bool:
        return len(self.reference_to) > 1


@dataclass(frozen=True)
class ChildRelationship:
    """ A one-to-many relationship: a collection of child objects that refer to the parent type """
    # Relationship name used in subqueries. Example: "Contacts". Some relationships have none
    name: Optional[str]
    # The parent type. Example: "Account"
    parent_type: str
    # The child type. Example: "Contact"
    child_type: str
    # The reference field on the child type. Example: "AccountId"
    field_name: Optional[str] = None


@dataclass(frozen=True)
class FieldSet:
    """ A named list of field paths declared for a type """
    name: str
    type_name: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class TypeInfo:
    """ Describes an object type: its fields, child relationships, field sets """
    name: str
    fields: tuple[FieldInfo, ...] = ()
    child_relationships: tuple[ChildRelationship, ...] = ()
    field_sets: tuple[FieldSet, ...] = ()

    @cached_property
    def _fields_by_name(self) -> dict[str, FieldInfo]:
        return {f.name.lower(): f for f in self.fields}

    @cached_property
    def _fields_by_relationship_name(self) -> dict[str, FieldInfo]:
        return {
            f.relationship_name.lower(): f
            for f in self.fields
            if f.is_reference and f.relationship_name
        }

    def get_field(self, name: str) -> Optional[FieldInfo]:
        """ Find a field by name, case-insensitive

        A reference field can also be found by its relationship name: "Account" finds "AccountId".
        """
        key = name.strip().lower()
        return self._fields_by_name.get(key) or self._fields_by_relationship_name.get(key)

    def get_field_set(self, name: str) -> Optional[FieldSet]:
        key = name.lower()
        for field_set in self.field_sets:
            if field_set.name.lower() == key:
                return field_set
        return None

    def iter_usable_child_relationships(self) -> abc.Iterator[ChildRelationship]:
        """ Iterate child relationships that can be used in subqueries: i.e. those that have a name """
        for relationship in self.child_relationships:
            if relationship.name and relationship.name.strip():
                yield relationship
