"""
Resource Server (protected MCP endpoint).
POST /mcp behind the bearer gate; protected resource metadata at a configurable well-known path.
Port 7000 by default.
"""
import json
import logging
from typing import Callable

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from oauth_testbed.config import ResourceServerConfig
from oauth_testbed.constants import JSONRPC_INTERNAL_ERROR, JSONRPC_INVALID_REQUEST
from oauth_testbed.errors import install_error_handlers, jsonrpc_error
from resource_server.auth import require_access_token
from resource_server.config import load_config
from resource_server.mcp import AdditionServer, JsonRpcHandler
from resource_server.metadata import build_router as build_metadata_router

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[str], JsonRpcHandler]


def _internal_error() -> JSONResponse:
    return JSONResponse(jsonrpc_error(JSONRPC_INTERNAL_ERROR, "Internal server error"), status_code=500)


def _close_quietly(handler: JsonRpcHandler) -> None:
    try:
        handler.close()
    except Exception:
        logger.exception("Error during handler cleanup")


def create_app(config: ResourceServerConfig, handler_factory: HandlerFactory = AdditionServer) -> FastAPI:
    """Build a resource server app. handler_factory(name) creates the downstream handler for each request."""
    app = FastAPI(title="Resource Server", version="1.0.0")
    app.state.config = config
    install_error_handlers(app)
    app.include_router(build_metadata_router(config), tags=["well-known"])

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "server": config.name}

    @app.post("/mcp")
    async def mcp(request: Request, _token: str = Depends(require_access_token)):
        """Authorized JSON-RPC request (single message or batch) forwarded to the downstream handler."""
        handler = handler_factory(config.name)
        try:
            try:
                body = json.loads(await request.body())
            except (json.JSONDecodeError, UnicodeDecodeError):
                logger.warning("MCP request body is not valid JSON")
                return _internal_error()

            if body == []:
                return JSONResponse(jsonrpc_error(JSONRPC_INVALID_REQUEST, "Invalid Request"))
            if isinstance(body, list):
                responses = [r for r in [await handler.handle(m) for m in body] if r is not None]
            else:
                response = await handler.handle(body)
                responses = [response] if response is not None else []
        except Exception:
            logger.exception("Error handling MCP request")
            return _internal_error()
        finally:
            _close_quietly(handler)

        logger.info("MCP request handled")
        if not responses:
            # Notifications only
            return Response(status_code=202)
        return JSONResponse(responses if isinstance(body, list) else responses[0])

    logger.info(
        "Resource server %s: metadata=%s authorization_servers=%s www_authenticate=%s",
        config.name,
        config.metadata_path,
        config.authorization_servers,
        config.include_www_authenticate,
    )
    return app


app = create_app(load_config())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "resource_server.main:app",
        host="127.0.0.1",
        port=7000,
        reload=True,
    )
