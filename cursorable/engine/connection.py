""" Connection: a page of nodes with Relay-style pagination info

See: https://relay.dev/graphql/connections.htm
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TypedDict

from cursorable.cursor import encode_cursor
from cursorable.typing import SARowDict

from .planner import PaginationPlan


@dataclass
class PageInfo:
    """ Relay Page Info """
    # Are there more rows after the end cursor?
    has_next_page: bool = False

    # Are there more rows before the start cursor?
    has_previous_page: bool = False

    # Cursor pointing to the first node, if any
    start_cursor: Optional[str] = None

    # Cursor pointing to the last node, if any
    end_cursor: Optional[str] = None

    def to_dict(self) -> PageInfoDict:
        return {
            'hasNextPage': self.has_next_page,
            'hasPreviousPage': self.has_previous_page,
            'startCursor': self.start_cursor,
            'endCursor': self.end_cursor,
        }


@dataclass
class Connection:
    """ A page of nodes, plus pagination metadata

    Nodes are always in the requested logical order: never in the internal query order.
    """
    # The list of rows on the current page
    nodes: list[SARowDict]

    # Pagination metadata
    page_info: PageInfo = field(default_factory=PageInfo)

    # The number of rows matching the filter; only when requested
    total_count: Optional[int] = None

    def to_dict(self) -> ConnectionDict:
        """ Export as a camelCase dict """
        ret: ConnectionDict = {
            'nodes': self.nodes,
            'pageInfo': self.page_info.to_dict(),
        }
        if self.total_count is not None:
            ret['totalCount'] = self.total_count
        return ret


class ConnectionBuilder:
    """ Turns over-fetched rows into a Connection

    Steps:
    1. Trim the sentinel row; detect the next/previous page
    2. A cursor proves that rows exist on its other side
    3. Reverse backward pages into display order
    4. Encode start/end cursors
    """

    def build(self, plan: PaginationPlan, rows: list[SARowDict], *, total_count: Optional[int] = None) -> Connection:
        """ Build a Connection from rows in query order

        Args:
            plan: The plan the rows were loaded with
            rows: Result rows, in query order: reversed relative to the display order when paginating backward
            total_count: The number of rows matching the filter, if counted
        """
        request = plan.request
        page_info = PageInfo()

        # The sentinel row: more rows exist in the direction of pagination.
        # It's at the tail of the query-ordered list, whatever the direction.
        nodes = list(rows)
        if len(nodes) > plan.page_size:
            del nodes[plan.page_size:]
            if plan.backward:
                page_info.has_previous_page = True
            else:
                page_info.has_next_page = True

        # A cursor's existence proves that rows precede it (after=) or follow it (before=)
        if request.cursor is not None:
            if plan.backward:
                page_info.has_next_page = True
            else:
                page_info.has_previous_page = True

        # Display order
        if plan.backward:
            nodes.reverse()

        # Cursors
        if nodes:
            page_info.start_cursor = encode_cursor(nodes[0], plan.sort_key)
            page_info.end_cursor = encode_cursor(nodes[-1], plan.sort_key)

        # Done
        return Connection(
            nodes=nodes,
            page_info=page_info,
            total_count=total_count,
        )


class PageInfoDict(TypedDict):
    """ Relay Page Info """
    hasNextPage: bool
    hasPreviousPage: bool
    startCursor: Optional[str]
    endCursor: Optional[str]


class _ConnectionDictBase(TypedDict):
    nodes: list[SARowDict]
    pageInfo: PageInfoDict


class ConnectionDict(_ConnectionDictBase, total=False):
    """ Connection, exported as a dict """
    totalCount: int
