from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version('soqlkit')
except PackageNotFoundError:  # not installed: running from a source checkout
    __version__ = '0.0.0'

from .engine import TypedQueryBuilder, QuerySettings
from .query_builder import QueryBuilder, Ordering, SortingDirection
from .schema import Schema, StaticSchema, SASchema, TypeInfo, FieldInfo, ChildRelationship, FieldSet
from .security import AccessControl, AllowAll, AccessPolicy

from . import exc
