""" Tools to resolve field paths and field handles to field names

When a field is selected by name, it's just a string: it is not yet known whether it actually exists.
Resolving walks the path against the schema, checks every step, and gives the canonical field path.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from sqlalchemy.orm.attributes import InstrumentedAttribute

from soqlkit import exc
from soqlkit.schema import Schema, TypeInfo, FieldInfo
from soqlkit.schema.names import field_name, type_name
from soqlkit.security import AccessControl
from soqlkit.typing import FieldHandle, TypeRef
from soqlkit.util.expressions import split_field_path


logger = logging.getLogger(__name__)


def resolve_field_path(path: str, Type: TypeInfo, schema: Schema, *,
                       access: Optional[AccessControl] = None,
                       disambiguation_type: Optional[TypeRef] = None) -> str:
    """ Resolve a dot-notation field path to the canonical field path

    Every segment but the last one must be a reference field: its relationship name goes into the path.
    The last segment goes in with its field name.

    Example:
        resolve_field_path('accountid.owner.NAME', Contact, schema)
        #-> 'Account.Owner.Name'

    Args:
        path: Field path, dot-notation
        Type: The type to start from
        schema: Schema to look up referenced types
        access: Access control to check every traversed field with. None to skip checks
        disambiguation_type: For polymorphic references: the type to traverse into. Defaults to the first one.

    Raises:
        exc.EmptyFieldNameError: blank path
        exc.InvalidFieldError: unknown field
        exc.NonReferenceFieldError: a field in the middle is not a reference field
        exc.AccessDeniedError: no read access to a field
    """
    if path is None or not path.strip():
        raise exc.EmptyFieldNameError(Type.name)

    *references, last = split_field_path(path)

    # Walk the references
    resolved: list[str] = []
    for segment in references:
        field = resolve_field_segment(segment, Type, access=access, path=path)
        if not field.is_reference:
            raise exc.NonReferenceFieldError(Type.name, field.name, path)

        resolved.append(field.relationship_name or field.name)
        Type = schema.get_type_or_fail(choose_reference_target(field, disambiguation_type))

    # The final field
    field = resolve_field_segment(last, Type, access=access, path=path)
    resolved.append(field.name)

    # Done
    result = '.'.join(resolved)
    if references:
        logger.debug('Resolved field path %r to %r', path, result)
    return result


def resolve_field_segment(name: str, Type: TypeInfo, *, access: Optional[AccessControl], path: str) -> FieldInfo:
    """ Resolve one segment of a field path, check access """
    if not name:
        raise exc.InvalidFieldError(Type.name, path)

    field = Type.get_field(name)
    if field is None:
        raise exc.InvalidFieldError(Type.name, name)

    if access is not None:
        access.check_field_readable(Type.name, field.name)

    return field


def resolve_field_handle(field: Optional[Union[FieldHandle, str]], Type: TypeInfo, *,
                         access: Optional[AccessControl] = None) -> str:
    """ Resolve a field handle to its field name, check access

    Raises:
        exc.InvalidFieldError: the handle is missing, or is not a field handle
        exc.AccessDeniedError: no read access to the field
    """
    if field is None:
        raise exc.InvalidFieldError(Type.name, None, message=f'Invalid field for "{Type.name}": None')
    if not isinstance(field, (FieldInfo, InstrumentedAttribute, str)):
        raise exc.InvalidFieldError(Type.name, None, message=f'Invalid field for "{Type.name}": {field!r}')

    name = field_name(field)
    if access is not None:
        access.check_field_readable(Type.name, name)
    return name


def choose_reference_target(field: FieldInfo, disambiguation_type: Optional[TypeRef]) -> str:
    """ Choose the type a reference field leads to

    Polymorphic references may point to many types: pick the one that the caller wants, or the first one.
    """
    if disambiguation_type is not None and field.is_polymorphic:
        wanted = type_name(disambiguation_type).lower()
        for target in field.reference_to:
            if target.lower() == wanted:
                return target

    return field.reference_to[0]
