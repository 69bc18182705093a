""" Relay pagination """

from __future__ import annotations

import graphql
from typing import Optional, TypedDict, Union

from cursorable.engine import PaginationEngine, Connection, PageInfoDict
from cursorable.engine.loader import SyncExecutor, AsyncExecutor
from cursorable.request import PaginationRequest, Forward, Backward
from cursorable.typing import FilterFunc, SARowDict

from .selection import selected_field_names_from_info


def relay_request(info: graphql.GraphQLResolveInfo = None, *,
                  first: int = None, after: str = None,
                  last: int = None, before: str = None,
                  sortKey: str = None,
                  filter: FilterFunc = None,
                  ) -> Union[Forward, Backward]:
    """ Convert Relay field arguments into a pagination request

    If `info` is given, `totalCount` is only counted when the query selects it.

    Example:
        def resolve_users(root, info, **args):
            request = relay_request(info, **args)
    """
    total_count = info is not None and 'totalCount' in set(selected_field_names_from_info(info))
    return PaginationRequest.from_dict(dict(
        first=first, after=after,
        last=last, before=before,
        sort_key=sortKey,
        filter=filter,
        total_count=total_count,
    ))


def relay_connection(engine: PaginationEngine, connection: Connection, sort_key: str = None) -> ConnectionDict:
    """ Get results in Relay paginated format

    Every edge gets its own cursor; `nodes` is provided as a shortcut

    Args:
        engine: The engine that loaded the connection. Used to make cursors
        connection: The loaded page
        sort_key: The sort key the page was loaded with
    """
    ret: ConnectionDict = {
        'edges': [
            {'node': node, 'cursor': engine.cursor_for(node, sort_key)}
            for node in connection.nodes
        ],
        'nodes': connection.nodes,
        'pageInfo': connection.page_info.to_dict(),
        'totalCount': connection.total_count,
    }
    return ret


def relay_query(engine: PaginationEngine, connection: SyncExecutor, info: graphql.GraphQLResolveInfo, **args) -> ConnectionDict:
    """ Resolve a Relay connection field

    Example:
        def resolve_users(root, info, **args):
            return relay_query(users_pagination, connection, info, **args)
    """
    request = relay_request(info, **args)
    page = engine.paginate(connection, request)
    return relay_connection(engine, page, request.sort_key)


async def relay_query_async(engine: PaginationEngine, connection: AsyncExecutor, info: graphql.GraphQLResolveInfo, **args) -> ConnectionDict:
    """ Resolve a Relay connection field, asynchronously """
    request = relay_request(info, **args)
    page = await engine.paginate_async(connection, request)
    return relay_connection(engine, page, request.sort_key)


class ConnectionDict(TypedDict):
    """ Relay Connection type: paginated list """
    edges: list[EdgeDict]
    nodes: list[SARowDict]
    pageInfo: PageInfoDict
    totalCount: Optional[int]


class EdgeDict(TypedDict):
    """ Relay Edge type: paginated item """
    node: Union[object, dict]
    cursor: str
