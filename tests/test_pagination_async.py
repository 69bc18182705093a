import pytest
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession

from cursorable import exc
from cursorable import Forward, Backward, define_pagination

from .conftest import ASYNC_DATABASE_URL
from .util.models import Base, Post, POST_SORT_KEYS, posts, ids


@pytest.mark.asyncio
async def test_paginate_async():
    """ Test: async pagination with AsyncConnection and AsyncSession """
    engine = define_pagination(Post, POST_SORT_KEYS)
    db = create_async_engine(ASYNC_DATABASE_URL)

    try:
        async with db.connect() as connection:
            await connection.run_sync(Base.metadata.create_all)
            await connection.execute(sa.insert(Post).values(posts(25)))

            # Forward
            page1 = await engine.paginate_async(connection, Forward(first=10, total_count=True))
            assert ids(page1.nodes) == list(range(25, 15, -1))
            assert page1.page_info.has_next_page is True
            assert page1.total_count == 25

            page2 = await engine.paginate_async(connection, {'first': 10, 'after': page1.page_info.end_cursor})
            assert ids(page2.nodes) == list(range(15, 5, -1))
            assert page2.page_info.has_previous_page is True
            assert page2.total_count is None

            # Backward: same page as the sync version
            back = await engine.paginate_async(connection, Backward(last=10, before=page2.page_info.start_cursor))
            assert back.nodes == page1.nodes
            assert back.page_info.has_previous_page is False

            # Raw rows
            rows = await engine.fetch_rows_async(connection, Forward(first=2))
            assert ids(rows) == [25, 24, 23]

            # Errors are raised before anything is awaited
            with pytest.raises(exc.UnknownSortKey):
                await engine.paginate_async(connection, {'sortKey': 'popular'})

            # AsyncSession
            async with AsyncSession(bind=connection) as ssn:
                page = await engine.paginate_async(ssn, Forward(first=3, sort_key='oldest'))
                assert ids(page.nodes) == [1, 2, 3]

            await connection.run_sync(Base.metadata.drop_all)
    finally:
        await db.dispose()
