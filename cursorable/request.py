""" Pagination requests: which page to load """

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from cursorable import exc
from cursorable.typing import FilterFunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class PaginationRequest:
    """ Pagination request: base for Forward and Backward

    A request is either Forward(first, after) or Backward(last, before).
    Use `PaginationRequest.from_dict()` to parse plain dicts.
    """
    # Name of the sort key to use. `None` means "omitted": use the default one
    sort_key: Optional[str] = None

    # Additional filter: a function that receives the model and returns a boolean expression.
    # It is applied alongside the cursor condition, and to the total count query
    filter: Optional[FilterFunc] = None

    # Load one extra row to detect whether more pages exist
    one_more: bool = True

    # Run a second query to get the total number of rows that match the filter
    total_count: bool = False

    # Paginating backward?
    backward: ClassVar[bool] = False

    @property
    def count(self) -> Optional[int]:
        """ The number of requested items: `first` or `last` """
        raise NotImplementedError

    @property
    def cursor(self) -> Optional[str]:
        """ The cursor: `after` or `before` """
        raise NotImplementedError

    def __post_init__(self):
        if type(self) is PaginationRequest:
            raise TypeError('PaginationRequest is abstract: use Forward(), Backward(), or PaginationRequest.from_dict()')

        count = self.count
        if count is not None and (isinstance(count, bool) or not isinstance(count, int)):
            raise exc.InvalidRequestError(f'Page size must be an integer, got {count!r}')
        if count is not None and count < 0:
            raise exc.InvalidRequestError(f'Page size cannot be negative, got {count!r}')
        if self.cursor is not None and not isinstance(self.cursor, str):
            raise exc.InvalidCursor(self.cursor, 'must be a string')  # type: ignore[unreachable]

    @classmethod
    def from_dict(cls, request: dict) -> Union[Forward, Backward]:
        """ Parse a pagination request from a dict

        Accepts both camelCase and snake_case keys:
            {'first': 10, 'after': '...', 'sortKey': 'newest', 'oneMore': True, 'totalCount': False}

        A request that has both forward (first/after) and backward (last/before) fields is resolved as forward.
        """
        common = dict(
            sort_key=_get(request, 'sortKey', 'sort_key'),
            filter=_get(request, 'filter'),
            one_more=_get(request, 'oneMore', 'one_more', default=True),
            total_count=_get(request, 'totalCount', 'total_count', default=False),
        )

        is_forward = request.get('first') is not None or request.get('after') is not None
        is_backward = request.get('last') is not None or request.get('before') is not None

        if is_forward and is_backward:
            logger.warning('Pagination request has both forward and backward fields; paginating forward: %r', sorted(request))

        if is_backward and not is_forward:
            return Backward(last=request.get('last'), before=request.get('before'), **common)
        else:
            return Forward(first=request.get('first'), after=request.get('after'), **common)


@dataclass(frozen=True, kw_only=True)
class Forward(PaginationRequest):
    """ Forward pagination: `first` items `after` the cursor """
    first: Optional[int] = None
    after: Optional[str] = None

    @property
    def count(self) -> Optional[int]:
        return self.first

    @property
    def cursor(self) -> Optional[str]:
        return self.after


@dataclass(frozen=True, kw_only=True)
class Backward(PaginationRequest):
    """ Backward pagination: `last` items `before` the cursor """
    last: Optional[int] = None
    before: Optional[str] = None

    backward: ClassVar[bool] = True

    @property
    def count(self) -> Optional[int]:
        return self.last

    @property
    def cursor(self) -> Optional[str]:
        return self.before


def _get(d: dict, *keys: str, default=None):
    """ Get the first available key from a dict """
    for key in keys:
        if d.get(key) is not None:
            return d[key]
    return default
