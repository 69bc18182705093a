""" Loading rows: execute statements, get dicts

Both sync (Connection, Session) and async (AsyncConnection, AsyncSession) executors are supported.
The only difference is the awaited `execute()`.
"""

from __future__ import annotations

from typing import Union

import sqlalchemy as sa
import sqlalchemy.orm
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from cursorable.typing import SARowDict


# Something that executes statements
SyncExecutor = Union[sa.engine.Connection, sa.orm.Session]
AsyncExecutor = Union[AsyncConnection, AsyncSession]


def load_rows(connection: SyncExecutor, stmt: sa.sql.Select) -> list[SARowDict]:
    """ Execute a statement, get rows as dicts """
    # We use `.mappings()` to convert a list of rows `list[RowMapping]` into a list of dicts `list[dict]`
    res = connection.execute(stmt)
    return [dict(row) for row in res.mappings()]


def load_scalar(connection: SyncExecutor, stmt: sa.sql.Select):
    """ Execute a statement, get one value """
    return connection.execute(stmt).scalar_one()


async def load_rows_async(connection: AsyncExecutor, stmt: sa.sql.Select) -> list[SARowDict]:
    """ Execute a statement asynchronously, get rows as dicts """
    res = await connection.execute(stmt)
    return [dict(row) for row in res.mappings()]


async def load_scalar_async(connection: AsyncExecutor, stmt: sa.sql.Select):
    """ Execute a statement asynchronously, get one value """
    res = await connection.execute(stmt)
    return res.scalar_one()
