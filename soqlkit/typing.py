from __future__ import annotations

from typing import Union, TYPE_CHECKING

import sqlalchemy as sa
import sqlalchemy.orm


if TYPE_CHECKING:
    from soqlkit.schema import FieldInfo, ChildRelationship, TypeInfo


# Annotation for SqlAlchemy models
SAModel = type

# An SqlAlchemy attribute
# That is, the instrumented attribute you get when accessing <model>.<attribute>
SAAttribute = sa.orm.attributes.InstrumentedAttribute

# Anything that names an object type: a type name, an SqlAlchemy model, or a TypeInfo
TypeRef = Union[str, SAModel, 'TypeInfo']

# A resolved field: schema field info, or an SqlAlchemy column attribute
FieldHandle = Union['FieldInfo', SAAttribute]

# A resolved child relationship: schema relationship info, or an SqlAlchemy relationship attribute
RelationshipHandle = Union['ChildRelationship', SAAttribute]
