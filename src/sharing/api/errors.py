"""HTTP mappings for the sharing errors that need a more specific status
than Protean's FastAPI integration gives their base classes."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sharing.exceptions import CapacityExceeded, NotFound, Unauthorized


def _error_body(exc) -> dict:
    return {"error": str(exc.messages) if hasattr(exc, "messages") else str(exc)}


def register_sharing_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized):
        return JSONResponse(status_code=403, content=_error_body(exc))

    @app.exception_handler(CapacityExceeded)
    async def capacity_handler(request: Request, exc: CapacityExceeded):
        return JSONResponse(status_code=409, content=_error_body(exc))

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content=_error_body(exc))
