from collections import abc
from typing import Optional


class BaseCursorableException(Exception):
    """ Base for all errors reported by this library """


class InvalidRequestError(BaseCursorableException):
    """ Invalid pagination request provided by the User

    Reported when a request can't be understood: e.g. a negative page size
    """

    def __init__(self, err: str):
        super().__init__(f'Pagination request error: {err}')


class InvalidCursor(BaseCursorableException):
    """ A cursor could not be decoded

    Reported when the opaque cursor string is not valid base64/JSON,
    or when it does not match the active sort key.
    """

    def __init__(self, cursor: Optional[str], reason: str):
        self.cursor = cursor
        self.reason = reason

        super().__init__(f'Invalid cursor {cursor!r}: {reason}')


class UnknownSortKey(BaseCursorableException):
    """ A sort key was explicitly named, but it's not registered """

    def __init__(self, name: str, known: abc.Iterable[str]):
        self.name = name
        self.known = tuple(known)

        super().__init__(f'Unknown sort key {name!r}. Known keys: {", ".join(self.known)}')


class LimitExceeded(BaseCursorableException):
    """ The requested page size is above the configured maximum

    Only raised with `PaginationSettings(strict_limit=True)`; otherwise, the value is clamped
    """

    def __init__(self, requested: int, max_limit: int):
        self.requested = requested
        self.max_limit = max_limit

        super().__init__(f'Requested {requested} items, but at most {max_limit} are allowed')


class InvalidSortKeyError(BaseCursorableException):
    """ Sort key configuration error

    Reported at setup time: this is a programming error, not a user error
    """


class InvalidColumnError(InvalidSortKeyError):
    """ Sort key mentioned an invalid column name

    Reported when a column mentioned by name is not found on the SqlAlchemy model
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')
