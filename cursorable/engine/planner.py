""" Pagination planner: turn a request into the shape of a query

Given a request and a sort key, the planner decides:
* Direction: forward (first/after) or backward (last/before)
* Effective per-column direction: reversible columns are flipped when paginating backward
* Limit: page size, plus one extra row to detect more pages
* Position predicate: the rows that come strictly after the cursor
"""

from __future__ import annotations

import logging
from collections import abc
from dataclasses import dataclass
from typing import Optional

import sqlalchemy as sa

from cursorable.cursor import CursorPayload, decode_cursor
from cursorable.request import PaginationRequest
from cursorable.sainfo.columns import resolve_column_by_name, is_column_nullable
from cursorable.sortkey import EffectiveColumnSort, SortKeyRegistry, SortKeySpec
from cursorable.typing import SAAttribute, SAModelOrAlias

from .settings import PaginationSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PlannedColumn:
    """ A sort key column, resolved against the model, with its effective direction """
    # The column expression: collated, if the modifier says so
    expression: sa.sql.ColumnElement

    # Effective sort: direction & NULLs placement used in the query
    sort: EffectiveColumnSort

    # Can the column contain NULLs?
    nullable: bool

    def order_by(self) -> sa.sql.ColumnElement:
        """ Get the ORDER BY clause for this column """
        expr = self.expression.asc() if self.sort.is_asc else self.expression.desc()

        # Non-nullable columns don't need the NULLS clause
        if not self.nullable:
            return expr
        return expr.nulls_first() if self.sort.nulls_first else expr.nulls_last()

    def after(self, value) -> sa.sql.ColumnElement:
        """ Condition: the column's value comes strictly after `value` in the effective ordering """
        if value is None:
            # NULLS FIRST: every non-NULL value comes after NULL
            # NULLS LAST: nothing comes after NULL
            return self.expression.is_not(None) if self.sort.nulls_first else sa.false()

        comparison = self.expression > value if self.sort.is_asc else self.expression < value
        if self.nullable and not self.sort.nulls_first:
            # NULLS LAST: NULLs come after any value
            return sa.or_(comparison, self.expression.is_(None))
        return comparison

    def equals(self, value) -> sa.sql.ColumnElement:
        """ Condition: the column's value equals `value` """
        if value is None:
            return self.expression.is_(None)
        return self.expression == value


@dataclass(frozen=True, eq=False)
class PaginationPlan:
    """ The shape of a paginated query """
    # The request being planned
    request: PaginationRequest

    # The sort key in use
    sort_key: SortKeySpec

    # Paginating backward? Then the query order is reversed relative to the display order
    backward: bool

    # Sort key columns, resolved
    columns: tuple[PlannedColumn, ...]

    # The number of items on a page
    page_size: int

    # The number of rows to load: `page_size`, plus one sentinel row
    limit: int

    # Decoded cursor, if any
    cursor: Optional[CursorPayload]


class PaginationPlanner:
    """ Plans paginated queries against a model

    Every method is pure: the planner keeps no state between calls
    """
    # The model to paginate
    Model: SAModelOrAlias

    # Available sort keys
    sort_keys: SortKeyRegistry

    # Settings: limits
    settings: PaginationSettings

    def __init__(self, Model: SAModelOrAlias, sort_keys: SortKeyRegistry, settings: PaginationSettings):
        self.Model = Model
        self.sort_keys = sort_keys
        self.settings = settings

    __slots__ = 'Model', 'sort_keys', 'settings'

    def plan(self, request: PaginationRequest) -> PaginationPlan:
        """ Plan a query for the request

        Raises:
            exc.UnknownSortKey: the request names an unknown sort key
            exc.InvalidCursor: the cursor can't be decoded with this sort key
            exc.LimitExceeded: the page size is above the max (only with `strict_limit`)
        """
        # Sort key
        sort_key = self.sort_keys.resolve(request.sort_key)

        # Direction
        backward = request.backward

        # Limit
        page_size = self.settings.get_final_limit(request.count)
        limit = page_size + 1 if request.one_more else page_size

        # Cursor
        cursor = decode_cursor(sort_key, request.cursor) if request.cursor is not None else None

        # Done
        plan = PaginationPlan(
            request=request,
            sort_key=sort_key,
            backward=backward,
            columns=tuple(self.resolve_columns(sort_key.effective(backward))),
            page_size=page_size,
            limit=limit,
            cursor=cursor,
        )
        logger.debug('Planned %s pagination: sort_key=%r page_size=%d limit=%d cursor=%s',
                     'backward' if backward else 'forward', sort_key.name, page_size, limit, cursor is not None)
        return plan

    def resolve_columns(self, columns: abc.Iterable[EffectiveColumnSort]) -> abc.Iterator[PlannedColumn]:
        """ Resolve sort key columns against the model """
        for column in columns:
            attribute: SAAttribute = resolve_column_by_name(column.column, self.Model, where='sort key')

            expression = attribute
            if column.column_sort.collation:
                expression = expression.collate(column.column_sort.collation)

            yield PlannedColumn(
                expression=expression,
                sort=column,
                nullable=is_column_nullable(attribute),
            )

    # ### Statement builders
    # PaginationEngine applies them one by one

    def apply_filter(self, plan: PaginationPlan, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Apply the caller's filter: an additional condition, alongside the cursor """
        if plan.request.filter is None:
            return stmt
        return stmt.where(plan.request.filter(self.Model))

    def apply_position(self, plan: PaginationPlan, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Apply the cursor: only load rows that come strictly after it """
        if plan.cursor is None:
            return stmt
        return stmt.where(position_predicate(plan.columns, [part.value for part in plan.cursor]))

    def apply_order(self, plan: PaginationPlan, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Apply ORDER BY, using effective directions """
        return stmt.order_by(*(column.order_by() for column in plan.columns))

    def apply_limit(self, plan: PaginationPlan, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Apply LIMIT: page size + the sentinel row """
        return stmt.limit(plan.limit)


def position_predicate(columns: abc.Sequence[PlannedColumn], values: abc.Sequence) -> sa.sql.ColumnElement:
    """ Build a condition: the row's tuple comes strictly after the `values` tuple

    The comparison is lexicographic: column by column, with ties broken by the next column.
    Independent per-column inequalities would skip rows whenever an earlier column ties.

    When every column is NOT NULL and sorted in the same direction, a row value comparison is used:

        (a, b) > (:a, :b)

    Otherwise, the comparison is expanded:

        (a > :a) OR (a = :a AND b < :b)
    """
    assert len(columns) == len(values)

    # Uniform direction, no NULLs, no collations: use a tuple comparison
    if (
        len(columns) > 1 and
        len({column.sort.direction for column in columns}) == 1 and
        not any(column.nullable for column in columns) and
        not any(column.sort.column_sort.collation for column in columns)
    ):
        left = sa.tuple_(*(column.expression for column in columns))
        right = sa.tuple_(*(
            sa.literal(value, type_=column.expression.type)
            for column, value in zip(columns, values)
        ))
        return left > right if columns[0].sort.is_asc else left < right

    # Expanded form: (c1 after) OR (c1 = AND c2 after) OR (c1 = AND c2 = AND c3 after) ...
    conditions = []
    for i, (column, value) in enumerate(zip(columns, values)):
        equals = [prev_column.equals(prev_value) for prev_column, prev_value in zip(columns[:i], values[:i])]
        conditions.append(sa.and_(*equals, column.after(value)))
    return sa.or_(*conditions)
