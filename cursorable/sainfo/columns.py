from __future__ import annotations

from collections import abc

import sqlalchemy as sa
import sqlalchemy.orm
from sqlalchemy.orm import ColumnProperty

from cursorable.typing import SAModelOrAlias, SAAttribute
from cursorable import exc

from .models import is_table, model_name


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> SAAttribute:
    """ Get a column by name, or fail

    Works with models, aliased classes, and Core tables.
    """
    # Core table: use the column collection
    if is_table(Model):
        try:
            return Model.c[field_name]
        except KeyError as e:
            raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # As simple as it looks, this code invokes __getattr__() on sa.orm.AliasedClass which adapts the SQL expression
    # to make sure it uses the proper aliased name in queries
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # Check that it actually is a column
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    # Done
    return attribute


def all_columns(Model: SAModelOrAlias) -> abc.Iterator[SAAttribute]:
    """ Get every column of a model: that's what "SELECT *" loads

    For mapped classes, yields instrumented attributes labeled by their attribute names
    """
    if is_table(Model):
        yield from Model.c
    else:
        for column_property in sa.inspect(Model).mapper.column_attrs:
            yield getattr(Model, column_property.key)


def is_column_property(attribute) -> bool:
    """ Is the attribute a plain column property? """
    return (
        isinstance(attribute, sa.orm.QueryableAttribute) and
        isinstance(attribute.property, ColumnProperty) and
        isinstance(attribute.property.expression, sa.Column)  # not an expression, but a real column
    )


def get_column(attribute: SAAttribute) -> sa.Column:
    """ Get the underlying Core column """
    if isinstance(attribute, sa.Column):
        return attribute
    return attribute.property.expression


def is_column_nullable(attribute: SAAttribute) -> bool:
    """ Check whether a column is nullable """
    return bool(get_column(attribute).nullable)


def is_column_unique(attribute: SAAttribute) -> bool:
    """ Check whether a column's value is unique """
    column = get_column(attribute)
    return bool(column.primary_key or column.unique)
