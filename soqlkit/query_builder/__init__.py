""" Untyped query builder

These classes only deal with text: field names are plain strings.
They do not consult the schema in any way.
"""

from .ordering import Ordering, SortingDirection
from .query import QueryBuilder
