""" Typed query builder: schema-aware layer on top of the untyped QueryBuilder """

from .typed_query import TypedQueryBuilder
from .settings import QuerySettings
from .resolve import resolve_field_path, resolve_field_handle
