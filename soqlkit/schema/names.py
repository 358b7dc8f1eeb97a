from typing import Union

from functools import cache

import sqlalchemy as sa
import sqlalchemy.orm

from soqlkit.typing import SAModel, SAAttribute, TypeRef
from .info import FieldInfo, TypeInfo


def model_name(Model: SAModel) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    return sa.orm.class_mapper(Model).class_.__name__


def type_name(type_ref: TypeRef) -> str:
    """ Get the name of an object type given as a name, a model, or a TypeInfo """
    if isinstance(type_ref, str):
        return type_ref
    elif isinstance(type_ref, TypeInfo):
        return type_ref.name
    elif isinstance(type_ref, type):
        return model_name(type_ref)
    else:
        raise NotImplementedError(type_ref)


@cache
def field_name(field: Union[str, FieldInfo, SAAttribute]) -> str:
    """ Get the name of the field """
    if isinstance(field, FieldInfo):
        return field.name
    elif isinstance(field, sa.orm.attributes.InstrumentedAttribute):
        return field.key
    elif isinstance(field, str):
        return field
    else:
        raise NotImplementedError(field)

