""" Paginate: everything needed to load a page

Overview:

* PaginationEngine is the high-level interface: plan, execute, build a Connection
* PaginationPlanner decides on the shape of the query
* ConnectionBuilder turns result rows into a Connection
"""

from .settings import PaginationSettings
from .pagination import PaginationEngine, define_pagination, ensure_request
from .planner import PaginationPlanner, PaginationPlan, PlannedColumn, position_predicate
from .connection import ConnectionBuilder, Connection, PageInfo, ConnectionDict, PageInfoDict
