""" Tools to inspect SqlAlchemy models """

from __future__ import annotations

from collections import abc
from functools import cache
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm
from sqlalchemy.orm import (  # type: ignore[attr-defined]  # sqlalchemy stubs not updated
    ColumnProperty,
    RelationshipProperty,
)
from sqlalchemy.orm import (  # type: ignore[attr-defined]  # sqlalchemy stubs not updated
    ONETOMANY,
    MANYTOONE,
)

from soqlkit.typing import SAModel


# region: Property types

@cache
def is_column_property(prop: sa.orm.MapperProperty) -> bool:
    return (
        isinstance(prop, ColumnProperty) and
        isinstance(prop.expression, sa.Column)  # not an expression, but a real column
    )


@cache
def is_reference_relationship(prop: sa.orm.MapperProperty) -> bool:
    """ Is it a many-to-one relationship: i.e. the local object points to another one? """
    return isinstance(prop, RelationshipProperty) and prop.direction is MANYTOONE


@cache
def is_child_relationship(prop: sa.orm.MapperProperty) -> bool:
    """ Is it a one-to-many relationship: i.e. a collection of child objects? """
    return isinstance(prop, RelationshipProperty) and prop.direction is ONETOMANY

# endregion


# region Model info

def iter_models(registry_or_models) -> abc.Iterator[SAModel]:
    """ Iterate models of a declarative base, or just iterate a list of models """
    if isinstance(registry_or_models, abc.Iterable):
        yield from registry_or_models
    else:
        for mapper in registry_or_models.registry.mappers:
            yield mapper.class_


def target_model(prop: RelationshipProperty) -> type:
    return prop.mapper.class_


def reference_column_key(mapper: sa.orm.Mapper, prop: RelationshipProperty) -> Optional[str]:
    """ Get the name of the foreign key attribute that a many-to-one relationship uses

    Gives None when the relationship uses a composite key or a column that's not mapped
    """
    if len(prop.local_columns) != 1:
        return None

    column, = prop.local_columns
    try:
        return mapper.get_property_by_column(column).key
    except sa.orm.exc.UnmappedColumnError:
        return None


def child_reference_column_key(prop: RelationshipProperty) -> Optional[str]:
    """ Get the name of the foreign key attribute on the child side of a one-to-many relationship """
    if len(prop.remote_side) != 1:
        return None

    column, = prop.remote_side
    try:
        return prop.mapper.get_property_by_column(column).key
    except sa.orm.exc.UnmappedColumnError:
        return None

# endregion
