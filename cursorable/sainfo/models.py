from typing import Union

import sqlalchemy as sa
import sqlalchemy.orm

from cursorable.typing import SAModelOrAlias


def is_table(Model: SAModelOrAlias) -> bool:
    """ Is this a plain Core table (not a mapped class)? """
    return isinstance(Model, sa.sql.expression.FromClause)


def unaliased_class(Model: SAModelOrAlias) -> Union[type, sa.sql.expression.FromClause]:
    """ Get the actual model class; unaliased, if was

    Core tables are returned as is.

    Args:
         Model: model class, AliasedClass, or a Table
    """
    if is_table(Model):
        return Model
    # NOTE: class_mapper() only accepts classes; inspect() works with aliases as well
    return sa.inspect(Model).mapper.class_


def model_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    Model = unaliased_class(Model)
    if is_table(Model):
        return Model.name
    return Model.__name__
