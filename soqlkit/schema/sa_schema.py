""" Schema that describes SqlAlchemy models """

from __future__ import annotations

from collections import abc
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm

from soqlkit.typing import SAModel
from . import sainfo
from .base import Schema
from .info import TypeInfo, FieldInfo, ChildRelationship, FieldSet
from .names import model_name


class SASchema(Schema):
    """ Schema lookup over SqlAlchemy declarative models

    Mapping rules:
    * Every column property is a scalar field
    * A many-to-one relationship turns its foreign key column into a reference field;
      the relationship key is used to traverse it: `Contact.account_id` + `Contact.account` => "account.name"
    * A one-to-many relationship is a child relationship, usable in subqueries
    * Optional `__field_sets__ = {name: [field paths]}` declares field sets

    Example:
        schema = SASchema(Base)  # every model of a declarative base
        schema = SASchema([User, Article])  # specific models
    """

    def __init__(self, registry_or_models):
        # Relationships are only known when mappers are configured
        sa.orm.configure_mappers()

        self.models: dict[str, SAModel] = {
            model_name(Model).lower(): Model
            for Model in sainfo.iter_models(registry_or_models)
        }
        self._types: dict[str, TypeInfo] = {}

    def describe(self, type_name: str) -> Optional[TypeInfo]:
        key = type_name.lower()
        if key not in self.models:
            return None

        # Describe once, reuse
        if key not in self._types:
            self._types[key] = describe_model(self.models[key])
        return self._types[key]


def describe_model(Model: SAModel) -> TypeInfo:
    """ Describe an SqlAlchemy model as a TypeInfo """
    name = model_name(Model)
    return TypeInfo(
        name=name,
        fields=tuple(_model_fields(Model)),
        child_relationships=tuple(_model_child_relationships(Model)),
        field_sets=tuple(
            FieldSet(name=field_set_name, type_name=name, fields=tuple(fields))
            for field_set_name, fields in getattr(Model, '__field_sets__', {}).items()
        ),
    )


def _model_fields(Model: SAModel) -> abc.Iterator[FieldInfo]:
    mapper: sa.orm.Mapper = sa.orm.class_mapper(Model)
    name = model_name(Model)

    # Foreign key columns that relationships use: { column key => relationship }
    references = {}
    for prop in mapper.relationships:
        if sainfo.is_reference_relationship(prop):
            column_key = sainfo.reference_column_key(mapper, prop)
            if column_key is not None:
                references[column_key] = prop

    # Columns
    for prop in mapper.column_attrs:
        if not sainfo.is_column_property(prop):
            continue

        relationship = references.get(prop.key)
        if relationship is None:
            yield FieldInfo(name=prop.key, type_name=name)
        else:
            yield FieldInfo(
                name=prop.key,
                type_name=name,
                reference_to=(model_name(sainfo.target_model(relationship)),),
                relationship_name=relationship.key,
            )


def _model_child_relationships(Model: SAModel) -> abc.Iterator[ChildRelationship]:
    mapper: sa.orm.Mapper = sa.orm.class_mapper(Model)
    for prop in mapper.relationships:
        if sainfo.is_child_relationship(prop):
            yield ChildRelationship(
                name=prop.key,
                parent_type=model_name(Model),
                child_type=model_name(sainfo.target_model(prop)),
                field_name=sainfo.child_reference_column_key(prop),
            )
