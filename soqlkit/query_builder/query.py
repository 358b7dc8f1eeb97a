""" Query Builder: untyped query text construction

This layer knows nothing about the schema: fields are plain strings.
"""

from __future__ import annotations

from collections import abc
from typing import Optional, Union

from soqlkit import exc
from soqlkit.typing import FieldHandle
from soqlkit.util.funcy import collecting

from .ordering import Ordering, SortingDirection


class QueryBuilder:
    """ Untyped query builder: collects fields, conditions, orderings, subqueries; renders query text

    Example:
        QueryBuilder('Account').select_fields(['Id', 'Name']).set_limit(10).to_query_text()
        #-> 'SELECT Id, Name FROM Account LIMIT 10'
    """
    # Root object type name
    table: str

    # Set when this builder is a subquery: the relationship it is selected through.
    # The FROM clause uses it instead of the table name.
    relationship_name: Optional[str]

    # Selected fields: { case-insensitive key => field path as given, trimmed }
    fields: dict[str, str]

    # Filter clause: opaque text
    condition: Optional[str]

    # LIMIT and OFFSET. 0 = not set
    limit: int
    offset: int

    # ORDER BY terms. Order matters
    orderings: list[Ordering]

    # Sort selected fields alphabetically when rendering?
    sort_fields: bool

    # Subqueries: { relationship name => QueryBuilder }, in the order they were added
    subqueries: dict[str, QueryBuilder]

    def __init__(self, table: str, *, relationship_name: Optional[str] = None, sort_fields: bool = True):
        if not table or not table.strip():
            raise exc.InvalidTableError(table)

        self.table = table
        self.relationship_name = relationship_name
        self.fields = {}
        self.condition = None
        self.limit = 0
        self.offset = 0
        self.orderings = []
        self.sort_fields = sort_fields
        self.subqueries = {}

    @property
    def is_subquery(self) -> bool:
        return self.relationship_name is not None

    def get_table(self) -> str:
        return self.table

    # region Fields

    def select_field(self, path: str) -> QueryBuilder:
        """ Add a field path to the SELECT list

        Fields are de-duplicated case-insensitively: the first spelling wins.
        """
        if path is None or not path.strip():
            raise exc.EmptyFieldNameError(self.table)

        key = _field_key(path)
        if key not in self.fields:
            self.fields[key] = path.strip()
        return self

    def select_fields(self, paths: abc.Iterable[str]) -> QueryBuilder:
        for path in paths:
            self.select_field(path)
        return self

    def get_selected_fields(self) -> list[str]:
        """ Get selected field paths: sorted, or in the order they were added """
        if self.sort_fields:
            return sorted(self.fields.values(), key=_field_collation_key)
        else:
            return list(self.fields.values())

    def set_sort_fields(self, sort_fields: bool) -> QueryBuilder:
        self.sort_fields = sort_fields
        return self

    def get_sort_fields(self) -> bool:
        return self.sort_fields

    # endregion

    # region Condition, limit, offset

    def set_condition(self, condition: Optional[str]) -> QueryBuilder:
        self.condition = condition
        return self

    def get_condition(self) -> Optional[str]:
        return self.condition

    def get_where_clause(self) -> str:
        if self.condition and self.condition.strip():
            return f'WHERE {self.condition}'
        return ''

    def set_limit(self, limit: int) -> QueryBuilder:
        self.limit = limit
        return self

    def get_limit(self) -> int:
        return self.limit

    def set_offset(self, offset: int) -> QueryBuilder:
        self.offset = offset
        return self

    def get_offset(self) -> int:
        return self.offset

    # endregion

    # region Ordering

    def add_ordering(self, field: Union[Ordering, str, FieldHandle],
                     direction: SortingDirection = SortingDirection.ASC, nulls_last: bool = False) -> QueryBuilder:
        """ Append an ORDER BY term

        Args:
            field: An Ordering, or a field to make one with
            direction: Sorting direction, if `field` is not an Ordering
            nulls_last: Put nulls last, if `field` is not an Ordering
        """
        if isinstance(field, Ordering):
            ordering = field
        else:
            ordering = Ordering(field, direction, nulls_last)

        self.orderings.append(ordering)
        return self

    def set_ordering(self, field: Union[Ordering, str, FieldHandle],
                     direction: SortingDirection = SortingDirection.ASC, nulls_last: bool = False) -> QueryBuilder:
        """ Replace all ORDER BY terms with just this one """
        self.orderings.clear()
        return self.add_ordering(field, direction, nulls_last)

    def get_orderings(self) -> list[Ordering]:
        return list(self.orderings)

    def get_ordering_clause(self) -> str:
        """ Render: "ORDER BY <term>, <term>, ...", or an empty string """
        if not self.orderings:
            return ''
        return 'ORDER BY ' + ', '.join(ordering.get_ordering() for ordering in self.orderings)

    # endregion

    # region Subqueries

    def subselect_query(self, relationship_name: str, table: Optional[str] = None) -> QueryBuilder:
        """ Get a subquery for a child relationship: existing, or a new one

        Args:
            relationship_name: The relationship to select child objects through. Used in the FROM clause.
            table: The child type name. Defaults to the relationship name.

        Raises:
            exc.InvalidSubqueryRelationshipError: this builder is a subquery itself
        """
        if not relationship_name or not relationship_name.strip():
            raise exc.InvalidSubqueryRelationshipError(self.table, relationship_name)

        # Reuse
        if relationship_name in self.subqueries:
            return self.subqueries[relationship_name]

        # Only one level deep
        if self.is_subquery:
            raise exc.InvalidSubqueryRelationshipError(
                self.table, relationship_name,
                f'Cannot add subquery "{relationship_name}": "{self.relationship_name}" is a subquery itself',
            )

        subquery = QueryBuilder(table or relationship_name, relationship_name=relationship_name, sort_fields=self.sort_fields)
        self.subqueries[relationship_name] = subquery
        return subquery

    def get_subqueries(self) -> dict[str, QueryBuilder]:
        return dict(self.subqueries)

    # endregion

    # region Output

    def to_query_text(self) -> str:
        """ Render the query text

        Format:
            SELECT <fields>, (<subquery>), ... FROM <table> [WHERE ...] [ORDER BY ...] [LIMIT n] [OFFSET n]
        """
        return ' '.join(self._render_clauses())

    @collecting
    def _render_clauses(self) -> abc.Iterator[str]:
        # SELECT: no fields and no subqueries? Select the Id
        selected = self.get_selected_fields() + [
            f'({subquery.to_query_text()})'
            for subquery in self.subqueries.values()
        ]
        yield 'SELECT ' + (', '.join(selected) or 'Id')

        # FROM
        yield f'FROM {self.relationship_name or self.table}'

        # WHERE
        if self.condition and self.condition.strip():
            yield self.get_where_clause()

        # ORDER BY
        if self.orderings:
            yield self.get_ordering_clause()

        # LIMIT, OFFSET
        if self.limit:
            yield f'LIMIT {self.limit}'
        if self.offset:
            yield f'OFFSET {self.offset}'

    def __str__(self):
        return self.to_query_text()

    def __repr__(self):
        return f'{type(self).__name__}({self.to_query_text()!r})'

    # endregion

    def deep_clone(self) -> QueryBuilder:
        """ Make a fully independent copy: subqueries included """
        clone = QueryBuilder(self.table, relationship_name=self.relationship_name, sort_fields=self.sort_fields)
        clone.fields = dict(self.fields)
        clone.condition = self.condition
        clone.limit = self.limit
        clone.offset = self.offset
        clone.orderings = list(self.orderings)  # Orderings are immutable
        clone.subqueries = {
            name: subquery.deep_clone()
            for name, subquery in self.subqueries.items()
        }
        return clone

    def __eq__(self, other):
        if not isinstance(other, QueryBuilder):
            return NotImplemented
        return (
            self.table == other.table and
            len(self.fields) == len(other.fields) and
            self.to_query_text() == other.to_query_text()
        )

    __hash__ = None  # type: ignore[assignment]


def _field_key(path: str) -> str:
    """ Case-insensitive field key: used for de-duplication """
    return path.strip().lower()


def _field_collation_key(path: str) -> tuple[str, str, str]:
    """ Sorting key for field paths

    Dots and letter case are ignored at first, so that related fields stay next to their reference field:
    AccountId, Account.Name, FirstName
    """
    lower = path.lower()
    return lower.replace('.', ''), lower, path
