from __future__ import annotations

from collections import abc
from typing import Optional

from soqlkit import exc
from soqlkit.typing import TypeRef
from .info import TypeInfo, FieldInfo, FieldSet, ChildRelationship
from .names import type_name


class Schema:
    """ Schema lookup: describes object types

    Builders consume this as a read-only service.
    Implementations only have to provide describe(); the rest are helpers on top of it.
    """

    def describe(self, type_name: str) -> Optional[TypeInfo]:
        """ Describe a type by name (case-insensitive). Give None if it does not exist """
        raise NotImplementedError

    def get_type_or_fail(self, type_ref: TypeRef) -> TypeInfo:
        """ Describe a type, or fail with InvalidTableError """
        name = type_name(type_ref) if type_ref is not None else None
        type_info = self.describe(name) if name else None
        if type_info is None:
            raise exc.InvalidTableError(name)
        return type_info

    def get_field(self, type_ref: TypeRef, field_name: str) -> Optional[FieldInfo]:
        return self.get_type_or_fail(type_ref).get_field(field_name)

    def get_field_or_fail(self, type_ref: TypeRef, field_name: str) -> FieldInfo:
        type_info = self.get_type_or_fail(type_ref)
        if not field_name or not field_name.strip():
            raise exc.EmptyFieldNameError(type_info.name)

        field = type_info.get_field(field_name)
        if field is None:
            raise exc.InvalidFieldError(type_info.name, field_name)
        return field

    def get_field_set(self, type_ref: TypeRef, name: str) -> Optional[FieldSet]:
        return self.get_type_or_fail(type_ref).get_field_set(name)

    def child_relationships(self, type_ref: TypeRef) -> abc.Iterator[ChildRelationship]:
        return self.get_type_or_fail(type_ref).iter_usable_child_relationships()
