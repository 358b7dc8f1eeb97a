""" In-memory schema """

from __future__ import annotations

from typing import Optional, Union

from .base import Schema
from .info import TypeInfo, FieldInfo, ChildRelationship, FieldSet


class StaticSchema(Schema):
    """ A schema made of pre-built TypeInfo objects

    Example:
        schema = StaticSchema(
            TypeInfo('Account', fields=(FieldInfo('Id', 'Account'), FieldInfo('Name', 'Account'))),
        )
    """

    def __init__(self, *types: TypeInfo):
        self.types = {type_info.name.lower(): type_info for type_info in types}

    def describe(self, type_name: str) -> Optional[TypeInfo]:
        return self.types.get(type_name.lower())

    @classmethod
    def from_dict(cls, schema: dict[str, dict]) -> StaticSchema:
        """ Build a schema from plain dicts

        Example:
            StaticSchema.from_dict({
                'Contact': {
                    'fields': ['Id', 'Name', {'name': 'AccountId', 'relationship_name': 'Account', 'reference_to': ['Account']}],
                },
                'Account': {
                    'fields': ['Id', 'Name'],
                    'children': {'Contacts': 'Contact'},
                    'field_sets': {'Summary': ['Id', 'Name']},
                },
            })

        Keys:
            fields: a list of field names, or dicts with FieldInfo arguments
            children: { relationship name => child type name }
            field_sets: { field set name => list of field paths }
        """
        return cls(*(
            _type_from_dict(name, definition)
            for name, definition in schema.items()
        ))


def _type_from_dict(name: str, definition: dict) -> TypeInfo:
    return TypeInfo(
        name=name,
        fields=tuple(
            _field_from_dict(name, field)
            for field in definition.get('fields', ())
        ),
        child_relationships=tuple(
            ChildRelationship(name=relationship_name, parent_type=name, child_type=child_type)
            for relationship_name, child_type in definition.get('children', {}).items()
        ),
        field_sets=tuple(
            FieldSet(name=field_set_name, type_name=name, fields=tuple(fields))
            for field_set_name, fields in definition.get('field_sets', {}).items()
        ),
    )


def _field_from_dict(type_name: str, field: Union[str, dict]) -> FieldInfo:
    if isinstance(field, str):
        return FieldInfo(name=field, type_name=type_name)
    else:
        return FieldInfo(
            name=field['name'],
            type_name=type_name,
            reference_to=tuple(field.get('reference_to', ())),
            relationship_name=field.get('relationship_name'),
        )
