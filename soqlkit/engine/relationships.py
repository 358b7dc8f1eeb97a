""" Tools to resolve child relationships for subqueries """

from __future__ import annotations

from typing import Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm

from soqlkit import exc
from soqlkit.schema import TypeInfo, ChildRelationship
from soqlkit.schema.names import type_name
from soqlkit.typing import TypeRef, RelationshipHandle


def resolve_relationship_by_name(name: Optional[str], Type: TypeInfo) -> ChildRelationship:
    """ Find a child relationship by name, case-insensitive

    Raises:
        exc.InvalidSubqueryRelationshipError: not found
    """
    if name:
        wanted = name.strip().lower()
        for relationship in Type.iter_usable_child_relationships():
            if relationship.name.lower() == wanted:
                return relationship

    raise exc.InvalidSubqueryRelationshipError(Type.name, name)


def resolve_relationship_by_child_type(child_type: Optional[TypeRef], Type: TypeInfo) -> ChildRelationship:
    """ Find the child relationship that leads to the given type

    When many relationships lead to the same type, the first one is used.

    Raises:
        exc.InvalidSubqueryRelationshipError: not found
    """
    if child_type is None:
        raise exc.InvalidSubqueryRelationshipError(Type.name, None, f'Invalid child type for "{Type.name}": None')

    try:
        wanted = type_name(child_type).lower()
    except NotImplementedError as e:
        raise exc.InvalidSubqueryRelationshipError(Type.name, None, f'Invalid child type for "{Type.name}": {child_type!r}') from e

    for relationship in Type.iter_usable_child_relationships():
        if relationship.child_type.lower() == wanted:
            return relationship

    raise exc.InvalidSubqueryRelationshipError(
        Type.name, None,
        f'"{Type.name}" has no child relationship to "{type_name(child_type)}"',
    )


def resolve_relationship_handle(relationship: RelationshipHandle, Type: TypeInfo) -> ChildRelationship:
    """ Get a ChildRelationship from a handle

    A ChildRelationship is used as is.
    An SqlAlchemy relationship attribute is looked up by its name.
    """
    if isinstance(relationship, ChildRelationship):
        return relationship
    elif isinstance(relationship, sa.orm.attributes.InstrumentedAttribute):
        return resolve_relationship_by_name(relationship.key, Type)
    else:
        raise exc.InvalidSubqueryRelationshipError(
            Type.name, None,
            f'Invalid child relationship for "{Type.name}": {relationship!r}',
        )


def resolve_relationship(relationship: Union[str, TypeRef, RelationshipHandle, None], Type: TypeInfo) -> ChildRelationship:
    """ Resolve any kind of relationship reference

    Supports:
    * Relationship name
    * Child model (SqlAlchemy model class) or TypeInfo
    * ChildRelationship
    * SqlAlchemy relationship attribute
    """
    if relationship is None or isinstance(relationship, str):
        return resolve_relationship_by_name(relationship, Type)
    elif isinstance(relationship, (type, TypeInfo)):
        return resolve_relationship_by_child_type(relationship, Type)
    else:
        return resolve_relationship_handle(relationship, Type)
