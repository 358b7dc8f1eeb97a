from __future__ import annotations

from collections import abc
from typing import Union

from soqlkit import exc
from .base import AccessControl


# Marker: all fields are readable
ALL_FIELDS = '*'


class AccessPolicy(AccessControl):
    """ Static access policy: a table of readable types and fields

    Example:
        AccessPolicy({
            'Account': '*',  # all fields
            'Contact': ['Id', 'Name'],  # only these fields
            'User': 'Name',  # only this field
        })

    Types that are not mentioned are not readable, and neither are their fields.
    Names are case-insensitive.
    """

    def __init__(self, readable: abc.Mapping[str, Union[str, abc.Iterable[str]]]):
        self.readable: dict[str, Union[str, frozenset[str]]] = {
            type_name.lower(): _readable_fields(fields)
            for type_name, fields in readable.items()
        }

    def check_object_readable(self, type_name: str) -> None:
        if type_name.lower() not in self.readable:
            raise exc.ObjectAccessError(type_name)

    def check_field_readable(self, type_name: str, field_name: str) -> None:
        fields = self.readable.get(type_name.lower())
        if fields is None:
            raise exc.FieldAccessError(type_name, field_name)
        if fields != ALL_FIELDS and field_name.lower() not in fields:
            raise exc.FieldAccessError(type_name, field_name)


def _readable_fields(fields: Union[str, abc.Iterable[str]]) -> Union[str, frozenset[str]]:
    """ Normalize: '*', a single field name, or a list of field names """
    if fields == ALL_FIELDS:
        return ALL_FIELDS
    elif isinstance(fields, str):
        return frozenset([fields.lower()])
    else:
        return frozenset(f.lower() for f in fields)
