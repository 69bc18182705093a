from __future__ import annotations

import dataclasses
from typing import Optional, TYPE_CHECKING

from cursorable import exc


if TYPE_CHECKING:
    import sqlalchemy as sa
    from cursorable.typing import SARowDict
    from .pagination import PaginationEngine


@dataclasses.dataclass
class PaginationSettings:
    """ Settings for pagination

    This object defines additional behavior that may be used with paginated queries:
    page size limits, statement customization, result customization.
    """
    # The page size you get by default, if not specified
    default_limit: int = 10

    # The max number of items you get, regardless of the requested page size
    max_limit: int = 100

    # Sort key to use when none is specified. Default: the first registered one
    default_sort_key: Optional[str] = None

    # Reject requests above `max_limit` with `LimitExceeded`. Default: silently clamp them
    strict_limit: bool = False

    def __post_init__(self):
        if self.default_limit < 0 or self.max_limit < 1:
            raise ValueError(f'Invalid limits: default_limit={self.default_limit}, max_limit={self.max_limit}')

    # ### Callbacks for PaginationEngine
    # PaginationEngine will use these methods to apply the settings

    def get_final_limit(self, limit: Optional[int]) -> int:
        """ Callback that fine-tunes the page size by applying default and max limits

        Used by: the planner to decide how many rows to return (not counting the extra "one more" row)

        Raises:
            exc.LimitExceeded: with `strict_limit`, when the limit is above `max_limit`
        """
        # Apply default limit
        if limit is None:
            limit = self.default_limit

        # Apply max limit
        if limit > self.max_limit:
            if self.strict_limit:
                raise exc.LimitExceeded(limit, self.max_limit)
            limit = self.max_limit

        # Done
        return limit

    def customize_statement(self, engine: PaginationEngine, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Callback that customizes query statements

        Used by: PaginationEngine to customize both the page statement and the count statement.
        Applied before LIMIT.

        Default behavior: none
        You can override this method for custom behavior, e.g. security filters
        """
        return stmt

    def customize_result(self, engine: PaginationEngine, rows: list[SARowDict]) -> list[SARowDict]:
        """ Callback that customizes result rows

        Used by: PaginationEngine to customize nodes right before they are put into a Connection.
        Rows are in display order here; cursors are already computed.

        Default behavior: none
        """
        return rows
