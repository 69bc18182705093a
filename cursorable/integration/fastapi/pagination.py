import fastapi
from typing import Optional, Union

from cursorable import exc
from cursorable.request import PaginationRequest, Forward, Backward


def pagination_request(*,
        first: Optional[int] = fastapi.Query(
            None,
            title='Pagination. The number of items to load after the cursor.',
            ge=0,
        ),
        after: Optional[str] = fastapi.Query(
            None,
            title='Pagination. Load items after this cursor.',
            description='Use `pageInfo.endCursor` of the previous page',
        ),
        last: Optional[int] = fastapi.Query(
            None,
            title='Pagination. The number of items to load before the cursor.',
            ge=0,
        ),
        before: Optional[str] = fastapi.Query(
            None,
            title='Pagination. Load items before this cursor.',
            description='Use `pageInfo.startCursor` of the next page',
        ),
        sort: Optional[str] = fastapi.Query(
            None,
            title='Sort key name',
        ),
        total_count: bool = fastapi.Query(
            False,
            alias='totalCount',
            title='Count the total number of items',
        ),
) -> Union[Forward, Backward]:
    """ Get the pagination request from the request parameters

    Example:
        /api/users?first=10&after=WzE2XQ==

    The cursor is not decoded here: that happens in `paginate()`.
    Use `configure_exception_handlers(app)` to report bad cursors as 422.

    Raises:
        fastapi.HTTPException: 422 when both forward (first/after) and backward (last/before) parameters are given
    """
    if (first is not None or after is not None) and (last is not None or before is not None):
        raise fastapi.HTTPException(
            status_code=422,
            detail='Choose a pagination direction and use either "first" and "after", or "last" and "before".',
        )

    try:
        return PaginationRequest.from_dict(dict(
            first=first, after=after,
            last=last, before=before,
            sort_key=sort,
            total_count=total_count,
        ))
    except exc.InvalidRequestError as e:
        raise fastapi.HTTPException(status_code=422, detail=str(e)) from e
