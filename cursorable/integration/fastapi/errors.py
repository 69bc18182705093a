""" Report pagination errors as HTTP 422 """

import logging

import fastapi
from fastapi.responses import JSONResponse

from cursorable import exc

logger = logging.getLogger(__name__)


# Errors caused by the end user's input.
# `InvalidSortKeyError` is not here: it's a setup error, and should remain a 500
USER_ERRORS = (
    exc.InvalidRequestError,
    exc.InvalidCursor,
    exc.UnknownSortKey,
    exc.LimitExceeded,
)


async def pagination_error_handler(request: fastapi.Request, e: Exception) -> JSONResponse:
    """ Convert a pagination error into a 422 response, the same shape as HTTPException's """
    logger.warning('Pagination error at %s: %s', request.url.path, e)
    return JSONResponse(status_code=422, content={'detail': str(e)})


def configure_exception_handlers(app: fastapi.FastAPI):
    """ Report pagination errors raised by `paginate()` as 422 responses

    Cursors are decoded when the page is loaded, not when `pagination_request` parses the parameters.
    Without these handlers, a malformed `after=` would become a 500.
    Call it before the app starts.

    Example:
        app = FastAPI()
        configure_exception_handlers(app)
    """
    for error_class in USER_ERRORS:
        app.add_exception_handler(error_class, pagination_error_handler)
