import os
import pytest
import sqlalchemy as sa


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    return sa.engine.create_engine(DATABASE_URL)


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


# URL of the database to connect to
# Default: in-memory SQLite. Set it to a Postgres URL to test against Postgres.
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')

# Same, for async tests
ASYNC_DATABASE_URL = os.getenv('ASYNC_DATABASE_URL', 'sqlite+aiosqlite://')
