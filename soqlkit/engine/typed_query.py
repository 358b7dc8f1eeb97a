""" Typed Query Builder: schema-aware query construction """

from __future__ import annotations

import logging
from collections import abc
from typing import Optional, Union

from soqlkit import exc
from soqlkit.query_builder import QueryBuilder, Ordering, SortingDirection
from soqlkit.schema import Schema, TypeInfo, FieldSet, ChildRelationship
from soqlkit.security import AccessControl, AllowAll
from soqlkit.typing import FieldHandle, TypeRef, RelationshipHandle
from soqlkit.util.expressions import is_cross_object_path

from .relationships import resolve_relationship, resolve_relationship_by_child_type
from .resolve import resolve_field_path, resolve_field_handle
from .settings import QuerySettings


logger = logging.getLogger(__name__)


class TypedQueryBuilder:
    """ Typed query builder: validates fields, orderings and subqueries against the schema

    Everything is resolved down to plain strings and given to the QueryBuilder it owns.
    That QueryBuilder renders the text.

    Example:
        q = TypedQueryBuilder('Contact', schema)
        q.select_fields(['FirstName', 'Account.Name'])
        q.subselect_query('Cases').select_field('Subject')
        q.add_ordering('LastName', SortingDirection.DESC)
        q.to_query_text()
        #-> 'SELECT Account.Name, FirstName, (SELECT Subject FROM Cases) FROM Contact ORDER BY LastName DESC NULLS FIRST'

    Collaborators are given explicitly:
    * schema: describes object types
    * access: checks read permissions. Only consulted when asked to: field-level security, assert_is_accessible()
    """
    # The builder that renders the text
    query: QueryBuilder

    # The type to select from
    root_type: TypeInfo

    # When this builder is a subquery: the relationship it's selected through
    parent_relationship: Optional[ChildRelationship]

    # Check field-level read access for every field added from now on
    enforce_fls: bool

    # Subqueries: { relationship name => TypedQueryBuilder }
    # Kept in step with `query.subqueries`: they share the same QueryBuilder objects
    subqueries: dict[str, TypedQueryBuilder]

    def __init__(self, root_type: TypeRef, schema: Schema, access: Optional[AccessControl] = None, *,
                 settings: Optional[QuerySettings] = None):
        """ Start a query for a type

        Args:
            root_type: Type name, or an SqlAlchemy model
            schema: Schema lookup
            access: Access control. Default: allow everything
            settings: Initial behavior

        Raises:
            exc.InvalidTableError: the type does not exist
        """
        settings = settings or QuerySettings()
        Type = schema.get_type_or_fail(root_type)

        self._init(
            query=QueryBuilder(Type.name, sort_fields=settings.sort_fields),
            root_type=Type,
            schema=schema,
            access=access or AllowAll(),
            parent_relationship=None,
            enforce_fls=settings.enforce_field_level_security,
        )

    @classmethod
    def _wrap(cls, query: QueryBuilder, root_type: TypeInfo, schema: Schema, access: AccessControl, *,
              parent_relationship: Optional[ChildRelationship], enforce_fls: bool) -> TypedQueryBuilder:
        """ Make a typed builder around an existing QueryBuilder """
        self = cls.__new__(cls)
        self._init(query=query, root_type=root_type, schema=schema, access=access,
                   parent_relationship=parent_relationship, enforce_fls=enforce_fls)
        return self

    def _init(self, *, query: QueryBuilder, root_type: TypeInfo, schema: Schema, access: AccessControl,
              parent_relationship: Optional[ChildRelationship], enforce_fls: bool):
        self.query = query
        self.root_type = root_type
        self.schema = schema
        self.access = access
        self.parent_relationship = parent_relationship
        self.enforce_fls = enforce_fls
        self.subqueries = {}

    # region Info

    def get_root_type(self) -> TypeInfo:
        return self.root_type

    def get_parent_relationship(self) -> Optional[ChildRelationship]:
        return self.parent_relationship

    def get_query_builder(self) -> QueryBuilder:
        return self.query

    # endregion

    # region Security

    def set_enforce_field_level_security(self, enforce: bool) -> TypedQueryBuilder:
        """ Check read access for fields added from now on. Fields that are already selected are not re-checked """
        self.enforce_fls = enforce
        return self

    def get_enforce_field_level_security(self) -> bool:
        return self.enforce_fls

    def assert_is_accessible(self) -> TypedQueryBuilder:
        """ Check that the root type is readable

        Raises:
            exc.ObjectAccessError: not readable
        """
        self.access.check_object_readable(self.root_type.name)
        return self

    @property
    def _field_access(self) -> Optional[AccessControl]:
        """ Access control to check fields with: only when field-level security is enforced """
        return self.access if self.enforce_fls else None

    # endregion

    # region Fields

    def select_field(self, field: Union[str, FieldHandle], disambiguation_type: Optional[TypeRef] = None) -> TypedQueryBuilder:
        """ Select a field

        Args:
            field: A field handle, or a field path (dot-notation)
            disambiguation_type: For field paths through polymorphic references: the type to traverse into

        Raises:
            exc.InvalidFieldError: the field does not exist, or is None
            exc.NonReferenceFieldError: a field path traverses a field that's not a reference
            exc.FieldAccessError: no read access to a field (when field-level security is enforced)
        """
        self.query.select_field(self._resolve_field(field, disambiguation_type))
        return self

    def select_fields(self, fields: abc.Iterable[Union[str, FieldHandle]]) -> TypedQueryBuilder:
        """ Select many fields. Fails on the first invalid one """
        if fields is None:
            raise exc.InvalidFieldError(self.root_type.name, None, message=f'Invalid fields for "{self.root_type.name}": None')

        for field in fields:
            self.select_field(field)
        return self

    def select_field_set(self, field_set: Union[str, FieldSet], allow_cross_object: bool = True) -> TypedQueryBuilder:
        """ Select every field of a field set

        Args:
            field_set: A FieldSet, or the name of a field set of the root type
            allow_cross_object: Allow field paths that traverse references

        Raises:
            exc.InvalidFieldSetError: unknown field set, field set of another type, or a cross-object field that's not allowed
        """
        if field_set is None:
            raise exc.InvalidFieldSetError('None', f'no field set given for "{self.root_type.name}"')
        elif isinstance(field_set, str):
            name = field_set
            field_set = self.schema.get_field_set(self.root_type, name)
            if field_set is None:
                raise exc.InvalidFieldSetError(name, f'not found on "{self.root_type.name}"')

        if field_set.type_name.lower() != self.root_type.name.lower():
            raise exc.InvalidFieldSetError(
                field_set.name,
                f'belongs to "{field_set.type_name}" but the query is on "{self.root_type.name}"',
            )

        if not allow_cross_object:
            for path in field_set.fields:
                if is_cross_object_path(path):
                    raise exc.InvalidFieldSetError(field_set.name, f'cross-object field "{path}" is not allowed')

        return self.select_fields(field_set.fields)

    def get_selected_fields(self) -> list[str]:
        return self.query.get_selected_fields()

    def set_sort_fields(self, sort_fields: bool) -> TypedQueryBuilder:
        self.query.set_sort_fields(sort_fields)
        return self

    def get_sort_fields(self) -> bool:
        return self.query.get_sort_fields()

    def _resolve_field(self, field: Union[str, FieldHandle, None], disambiguation_type: Optional[TypeRef] = None) -> str:
        """ Resolve a field path or a field handle to a field name. Checks access, if enforced """
        if isinstance(field, str):
            return resolve_field_path(field, self.root_type, self.schema,
                                      access=self._field_access,
                                      disambiguation_type=disambiguation_type)
        else:
            return resolve_field_handle(field, self.root_type, access=self._field_access)

    # endregion

    # region Condition, limit, offset

    def set_condition(self, condition: Optional[str]) -> TypedQueryBuilder:
        self.query.set_condition(condition)
        return self

    def get_condition(self) -> Optional[str]:
        return self.query.get_condition()

    def set_limit(self, limit: int) -> TypedQueryBuilder:
        self.query.set_limit(limit)
        return self

    def get_limit(self) -> int:
        return self.query.get_limit()

    def set_offset(self, offset: int) -> TypedQueryBuilder:
        self.query.set_offset(offset)
        return self

    def get_offset(self) -> int:
        return self.query.get_offset()

    # endregion

    # region Ordering

    def add_ordering(self, field: Union[Ordering, str, FieldHandle],
                     direction: SortingDirection = SortingDirection.ASC, nulls_last: bool = False) -> TypedQueryBuilder:
        """ Append an ORDER BY term

        Args:
            field: An Ordering (used as is), a field path, or a field handle
            direction: Sorting direction
            nulls_last: Put nulls last. Default: nulls first

        Raises:
            exc.InvalidFieldError: the field does not exist, or is None
            exc.FieldAccessError: no read access to a field (when field-level security is enforced)
        """
        self.query.add_ordering(self._make_ordering(field, direction, nulls_last))
        return self

    def set_ordering(self, field: Union[Ordering, str, FieldHandle],
                     direction: SortingDirection = SortingDirection.ASC, nulls_last: bool = False) -> TypedQueryBuilder:
        """ Replace all ORDER BY terms with just this one """
        self.query.set_ordering(self._make_ordering(field, direction, nulls_last))
        return self

    def get_orderings(self) -> list[Ordering]:
        return self.query.get_orderings()

    def _make_ordering(self, field: Union[Ordering, str, FieldHandle, None],
                       direction: SortingDirection, nulls_last: bool) -> Ordering:
        if isinstance(field, Ordering):
            return field
        elif isinstance(field, str):
            return Ordering(self._resolve_field(field), direction, nulls_last)
        else:
            # Keep the handle, but check it
            self._resolve_field(field)
            return Ordering(field, direction, nulls_last)

    # endregion

    # region Subqueries

    def subselect_query(self, relationship: Union[str, TypeRef, RelationshipHandle],
                        assert_accessible: bool = False) -> TypedQueryBuilder:
        """ Get a subquery that selects child objects through a relationship: existing, or a new one

        Args:
            relationship: Relationship name, child model or TypeInfo, ChildRelationship, or an SqlAlchemy relationship attribute
            assert_accessible: Check that the child type is readable

        Raises:
            exc.InvalidSubqueryRelationshipError: unknown relationship, or this builder is a subquery itself
            exc.ObjectAccessError: the child type is not readable (with `assert_accessible`)
        """
        return self._attach_subquery(resolve_relationship(relationship, self.root_type), assert_accessible)

    def subselect_query_for_type(self, child_type: TypeRef, assert_accessible: bool = False) -> TypedQueryBuilder:
        """ Get a subquery that selects child objects of the given type

        Args:
            child_type: Child type name, a model, or a TypeInfo

        Raises:
            exc.InvalidSubqueryRelationshipError: no relationship to this type, or this builder is a subquery itself
        """
        return self._attach_subquery(resolve_relationship_by_child_type(child_type, self.root_type), assert_accessible)

    def get_subqueries(self) -> dict[str, TypedQueryBuilder]:
        return dict(self.subqueries)

    def _attach_subquery(self, relationship: ChildRelationship, assert_accessible: bool) -> TypedQueryBuilder:
        # Reuse
        if relationship.name in self.subqueries:
            return self.subqueries[relationship.name]

        # Only one level deep
        if self.parent_relationship is not None:
            raise exc.InvalidSubqueryRelationshipError(
                self.root_type.name, relationship.name,
                f'Cannot add subquery "{relationship.name}": '
                f'"{self.parent_relationship.name}" is a subquery itself',
            )

        try:
            ChildType = self.schema.get_type_or_fail(relationship.child_type)
        except exc.InvalidTableError as e:
            raise exc.InvalidSubqueryRelationshipError(
                self.root_type.name, relationship.name,
                f'Child type "{relationship.child_type}" of relationship "{relationship.name}" is not in the schema',
            ) from e
        if assert_accessible:
            self.access.check_object_readable(ChildType.name)

        # Create, register
        subquery = TypedQueryBuilder._wrap(
            self.query.subselect_query(relationship.name, table=ChildType.name),
            ChildType,
            self.schema,
            self.access,
            parent_relationship=relationship,
            enforce_fls=self.enforce_fls,
        )
        self.subqueries[relationship.name] = subquery
        logger.debug('Subquery %r (%s) added to %s', relationship.name, ChildType.name, self.root_type.name)

        # Done
        return subquery

    # endregion

    # region Output

    def to_query_text(self) -> str:
        """ Render the query text """
        return self.query.to_query_text()

    def __str__(self):
        return self.to_query_text()

    def __repr__(self):
        return f'{type(self).__name__}({self.to_query_text()!r})'

    # endregion

    def deep_clone(self) -> TypedQueryBuilder:
        """ Make a fully independent copy: subqueries included

        Schema facts are shared: they are immutable.
        """
        query = self.query.deep_clone()
        clone = TypedQueryBuilder._wrap(
            query, self.root_type, self.schema, self.access,
            parent_relationship=self.parent_relationship,
            enforce_fls=self.enforce_fls,
        )
        clone.subqueries = {
            name: TypedQueryBuilder._wrap(
                query.subqueries[name], subquery.root_type, subquery.schema, subquery.access,
                parent_relationship=subquery.parent_relationship,
                enforce_fls=subquery.enforce_fls,
            )
            for name, subquery in self.subqueries.items()
        }
        return clone

    def __eq__(self, other):
        if not isinstance(other, TypedQueryBuilder):
            return NotImplemented
        return self.query == other.query

    __hash__ = None  # type: ignore[assignment]
