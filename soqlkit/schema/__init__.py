""" Schema lookup: describes object types, their fields and relationships """

from .info import TypeInfo, FieldInfo, ChildRelationship, FieldSet
from .base import Schema
from .static import StaticSchema
from .sa_schema import SASchema
from .names import type_name, field_name
