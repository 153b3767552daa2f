"""Exception handlers shared by the application and test apps."""

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

NOT_FOUND_MESSAGE = "Not found!"


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unmatched paths with a plain-text 404; defer everything else."""
    if exc.status_code == 404:
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)
    return await http_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
