""" Query Builder: the ORDER BY term """

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from soqlkit import exc
from soqlkit.schema import Schema
from soqlkit.schema.names import field_name
from soqlkit.typing import FieldHandle, TypeRef


class SortingDirection(Enum):
    ASC = 'ASC'
    DESC = 'DESC'


@dataclass(frozen=True)
class Ordering:
    """ One ORDER BY term: a field, a direction, and where nulls go

    The field is either a field path string, or a resolved field handle.
    Either way, get_field() gives the field name.

    Example:
        Ordering('Name', SortingDirection.DESC, nulls_last=True).get_ordering()
        #-> 'Name DESC NULLS LAST'
    """
    field: Union[str, FieldHandle]
    direction: SortingDirection = SortingDirection.ASC
    # By default, nulls go first
    nulls_last: bool = False

    def __post_init__(self):
        # Check the field
        if self.field is None:
            raise exc.InvalidFieldError(None, None, message='Ordering field cannot be None')
        if isinstance(self.field, str) and not self.field.strip():
            raise exc.EmptyFieldNameError()

        # Accept direction names: 'asc', 'DESC'
        if isinstance(self.direction, str):
            object.__setattr__(self, 'direction', SortingDirection(self.direction.upper()))

    @classmethod
    def for_field(cls, schema: Schema, type_ref: TypeRef, field_name: str,
                  direction: SortingDirection = SortingDirection.ASC, nulls_last: bool = False) -> Ordering:
        """ Make an ordering for a field that is checked against the schema

        Raises:
            exc.InvalidTableError: the type does not exist
            exc.InvalidFieldError: the field does not exist
        """
        field = schema.get_field_or_fail(type_ref, field_name)
        return cls(field, direction, nulls_last)

    def get_field(self) -> str:
        return field_name(self.field)

    def get_direction(self) -> SortingDirection:
        return self.direction

    def is_nulls_last(self) -> bool:
        return self.nulls_last

    def get_ordering(self) -> str:
        """ Render the term: "<field> <ASC|DESC> <NULLS FIRST|NULLS LAST>" """
        nulls = 'NULLS LAST' if self.nulls_last else 'NULLS FIRST'
        return f'{self.get_field()} {self.direction.value} {nulls}'

    def get_ordering_clause(self) -> str:
        """ Render a clause with just this one term """
        return f'ORDER BY {self.get_ordering()}'
