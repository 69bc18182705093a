""" PaginationEngine: cursor-based pagination against an SqlAlchemy model

Flow:

    request -> PaginationPlanner (sort key, cursor, limit) -> SELECT ... -> rows -> ConnectionBuilder -> Connection
"""

from __future__ import annotations

import logging
from collections import abc
from typing import Optional, Union

import sqlalchemy as sa

from cursorable.cursor import encode_cursor
from cursorable.request import PaginationRequest
from cursorable.sainfo.columns import all_columns, resolve_column_by_name, is_column_unique, is_column_nullable
from cursorable.sainfo.models import model_name
from cursorable.sortkey import ColumnSort, SortKeyRegistry, SortKeySpec
from cursorable.typing import SAModelOrAlias, SARowDict

from .connection import Connection, ConnectionBuilder
from .loader import SyncExecutor, AsyncExecutor, load_rows, load_scalar, load_rows_async, load_scalar_async
from .planner import PaginationPlan, PaginationPlanner
from .settings import PaginationSettings

logger = logging.getLogger(__name__)


class PaginationEngine:
    """ Pagination Engine: paginates a model with opaque cursors

    Example:
        engine = define_pagination(User, {
            'newest': [
                ('created_at', {'direction': 'desc', 'reversible': True, 'timestamp': True}),
                ('id', {'direction': 'desc', 'reversible': True}),
            ],
        })

        page = engine.paginate(connection, Forward(first=10))
        page = engine.paginate(connection, Forward(first=10, after=page.page_info.end_cursor))

    Every call is independent: the only state that pagination carries between calls is the cursor string.
    """
    # The model to paginate: a model class, an aliased class, or a Core table
    Model: SAModelOrAlias

    # Model name, for logging
    model_name: str

    # Registered sort keys
    sort_keys: SortKeyRegistry

    # Settings
    settings: PaginationSettings

    # Planner: makes statements
    planner: PaginationPlanner

    # Builder: makes connections
    builder: ConnectionBuilder

    def __init__(self, Model: SAModelOrAlias, sort_keys: SortKeyRegistry, settings: PaginationSettings = None):
        """ Prepare to paginate a model

        Args:
            Model: The model to paginate
            sort_keys: Sort keys. The registry becomes read-only.
            settings: Limits and customizations

        Raises:
            exc.InvalidColumnError: a sort key mentions a column that the model doesn't have
            exc.InvalidSortKeyError: the default sort key is not registered
        """
        self.Model = Model
        self.model_name = model_name(Model)
        self.settings = settings or self.DEFAULT_SETTINGS
        self.sort_keys = sort_keys

        # Default sort key: from the settings, unless set on the registry
        if self.sort_keys.default_name is None:
            self.sort_keys.default_name = self.settings.default_sort_key

        # Check sort keys against the model
        for sort_key in self.sort_keys:
            self._check_sort_key(sort_key)
        self.sort_keys.freeze()

        self.planner = self.Planner(Model, self.sort_keys, self.settings)
        self.builder = self.Builder()

    __slots__ = 'Model', 'model_name', 'sort_keys', 'settings', 'planner', 'builder'

    # Default settings object
    DEFAULT_SETTINGS = PaginationSettings()

    # Overridable classes
    Planner = PaginationPlanner
    Builder = ConnectionBuilder

    # ### Planning

    def plan(self, request: Union[PaginationRequest, dict]) -> PaginationPlan:
        """ Plan a request: resolve the sort key, decode the cursor, decide on the limit

        Raises:
            exc.UnknownSortKey: explicitly named sort key is not registered
            exc.InvalidCursor: bad cursor
            exc.LimitExceeded: page size above the max (only with `strict_limit`)
        """
        return self.planner.plan(ensure_request(request))

    def statement(self, request: Union[PaginationRequest, dict, PaginationPlan]) -> sa.sql.Select:
        """ Build the SELECT statement that loads a page

        The statement loads `limit` rows in query order: reversed when paginating backward.
        """
        plan = request if isinstance(request, PaginationPlan) else self.plan(request)

        # Prepare a boilerplate statement for the current model: all columns
        stmt = sa.select(*all_columns(self.Model))

        # Filter, position, order
        stmt = self.planner.apply_filter(plan, stmt)
        stmt = self.planner.apply_position(plan, stmt)
        stmt = self.planner.apply_order(plan, stmt)

        # Customization handler: before LIMIT
        stmt = self.settings.customize_statement(self, stmt)

        # Limit
        stmt = self.planner.apply_limit(plan, stmt)

        # Done
        return stmt

    def count_statement(self, request: Union[PaginationRequest, dict, PaginationPlan]) -> sa.sql.Select:
        """ Build the SELECT COUNT statement: same filter, no cursor, no limit """
        plan = request if isinstance(request, PaginationPlan) else self.plan(request)

        # Prepare the statement
        stmt = sa.select(sa.func.count()).select_from(self.Model)

        # Apply everything that may change the number of matching rows
        stmt = self.planner.apply_filter(plan, stmt)
        stmt = self.settings.customize_statement(self, stmt)

        # Done
        return stmt

    # ### Sync API

    def fetch_rows(self, connection: SyncExecutor, request: Union[PaginationRequest, dict]) -> list[SARowDict]:
        """ Load raw rows: in query order, with the sentinel row """
        return load_rows(connection, self.statement(request))

    def paginate(self, connection: SyncExecutor, request: Union[PaginationRequest, dict]) -> Connection:
        """ Load a page

        Args:
            connection: Connection or Session to execute queries with
            request: Forward(first, after), Backward(last, before), or a dict

        Raises:
            exc.UnknownSortKey: explicitly named sort key is not registered
            exc.InvalidCursor: bad cursor
            exc.LimitExceeded: page size above the max (only with `strict_limit`)
        """
        plan = self.plan(request)

        # Page query
        rows = load_rows(connection, self.statement(plan))

        # Count query
        total_count: Optional[int] = None
        if plan.request.total_count:
            total_count = load_scalar(connection, self.count_statement(plan))

        return self._build(plan, rows, total_count)

    # ### Async API

    async def fetch_rows_async(self, connection: AsyncExecutor, request: Union[PaginationRequest, dict]) -> list[SARowDict]:
        """ Load raw rows: in query order, with the sentinel row """
        return await load_rows_async(connection, self.statement(request))

    async def paginate_async(self, connection: AsyncExecutor, request: Union[PaginationRequest, dict]) -> Connection:
        """ Load a page, asynchronously

        Same as paginate(), but with an AsyncConnection or an AsyncSession.
        NOTE: with `total_count`, two queries are made. Run them in one transaction for a consistent snapshot.
        """
        plan = self.plan(request)

        # Page query
        rows = await load_rows_async(connection, self.statement(plan))

        # Count query
        total_count: Optional[int] = None
        if plan.request.total_count:
            total_count = await load_scalar_async(connection, self.count_statement(plan))

        return self._build(plan, rows, total_count)

    # ### Cursors

    def cursor_for(self, row: SARowDict, sort_key: Optional[str] = None) -> str:
        """ Make a cursor pointing to an arbitrary row

        Raises:
            exc.UnknownSortKey: explicitly named sort key is not registered
        """
        return encode_cursor(row, self.sort_keys.resolve(sort_key))

    def _build(self, plan: PaginationPlan, rows: list[SARowDict], total_count: Optional[int]) -> Connection:
        connection = self.builder.build(plan, rows, total_count=total_count)
        connection.nodes = self.settings.customize_result(self, connection.nodes)

        logger.debug('Paginated %s: %d nodes, has_next_page=%s has_previous_page=%s',
                     self.model_name, len(connection.nodes),
                     connection.page_info.has_next_page, connection.page_info.has_previous_page)
        return connection

    def _check_sort_key(self, sort_key: SortKeySpec):
        """ Check sort key columns against the model

        A sort key defines a total order only if its final column is UNIQUE NOT NULL.
        Otherwise, rows that tie on every column can be skipped or duplicated at page boundaries.
        """
        attributes = [resolve_column_by_name(name, self.Model, where=f'sort key {sort_key.name!r}') for name in sort_key.names]

        final = attributes[-1]
        if not is_column_unique(final) or is_column_nullable(final):
            logger.warning('Sort key %r of %s: final column %r is not UNIQUE NOT NULL; pagination may skip or repeat rows',
                           sort_key.name, self.model_name, sort_key.names[-1])


def define_pagination(
        Model: SAModelOrAlias,
        sort_keys: abc.Mapping[str, abc.Iterable[Union[ColumnSort, str, tuple[str, dict]]]],
        *,
        max_limit: int = None,
        default_limit: int = None,
        default_sort_key: str = None,
        settings: PaginationSettings = None,
) -> PaginationEngine:
    """ Define pagination for a model

    Example:
        engine = define_pagination(User, {
            'newest': [
                ('created_at', {'direction': 'desc', 'reversible': True, 'timestamp': True}),
                ('id', {'direction': 'desc', 'reversible': True}),
            ],
            'alphabetical': [
                ('name', {'direction': 'asc', 'reversible': True}),
                ('id', {'direction': 'asc', 'reversible': True}),
            ],
        }, max_limit=50, default_limit=20)

    Args:
        Model: The model to paginate
        sort_keys: Sort key name => list of column sorts. Registration order matters: the first key is the default one.
        max_limit: The max page size. Default: 100
        default_limit: The page size when not specified. Default: 10
        default_sort_key: The sort key to use when not specified. Default: the first one
        settings: Settings object. Mutually exclusive with the keyword arguments above
    """
    if settings is None:
        settings = PaginationSettings(
            **{k: v for k, v in dict(max_limit=max_limit, default_limit=default_limit, default_sort_key=default_sort_key).items()
               if v is not None}
        )
    else:
        assert max_limit is None and default_limit is None and default_sort_key is None, \
            'Provide either `settings`, or the individual settings, not both'

    # Sort keys
    registry = SortKeyRegistry()
    for name, columns in sort_keys.items():
        registry.register(name, columns)

    # Engine
    return PaginationEngine(Model, registry, settings)


def ensure_request(request: Union[PaginationRequest, dict]) -> PaginationRequest:
    """ Make sure that the request is a PaginationRequest; parse a dict otherwise """
    if isinstance(request, PaginationRequest):
        return request
    elif isinstance(request, dict):
        return PaginationRequest.from_dict(request)
    else:
        raise TypeError(f'Expected a PaginationRequest or a dict, got {type(request).__name__}')
