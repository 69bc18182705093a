from collections import abc
from typing import Union

import sqlalchemy as sa
import sqlalchemy.orm


# Annotation for SqlAlchemy models
SAModel = type

# Annotation for SqlAlchemy models, aliased classes, or plain Core tables
SAModelOrAlias = Union[SAModel, sa.orm.util.AliasedClass, sa.Table]

# Annotation for dict rows (result rows returned as dicts)
SARowDict = dict

# An SqlAlchemy attribute or a Core column
SAAttribute = Union[sa.orm.attributes.InstrumentedAttribute, sa.Column]

# A caller-supplied filter: receives the paginated model, returns a boolean SQL expression.
# Example: lambda User: User.active == True
FilterFunc = abc.Callable[[SAModelOrAlias], sa.sql.ColumnElement]
