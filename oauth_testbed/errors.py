"""
Error responses shared by both servers.
Handlers raise HTTPException with a dict detail; the dict is sent as the body itself so OAuth errors
come out as {error, error_description} and resource errors as JSON-RPC envelopes.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


def oauth_error(status_code: int, error: str, error_description: str | None = None) -> HTTPException:
    detail = {"error": error}
    if error_description:
        detail["error_description"] = error_description
    return HTTPException(status_code=status_code, detail=detail)


def jsonrpc_error(code: int, message: str, id=None) -> dict:
    return {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": id}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = getattr(exc, "headers", None)
    if isinstance(exc.detail, dict):
        return JSONResponse(exc.detail, status_code=exc.status_code, headers=headers)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
