from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version('cursorable')
except PackageNotFoundError:
    __version__ = '0.0.0'

from .engine import define_pagination, PaginationEngine, PaginationSettings
from .engine import Connection, PageInfo
from .request import PaginationRequest, Forward, Backward
from .sortkey import ColumnSort, SortingDirection, SortKeySpec, SortKeyRegistry
from .cursor import CursorCodec, encode_cursor, decode_cursor

from . import exc
