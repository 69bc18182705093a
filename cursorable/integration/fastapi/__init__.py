""" Integration with FastAPI """

from .pagination import pagination_request
from .errors import configure_exception_handlers, pagination_error_handler
