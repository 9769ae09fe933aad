"""
Authorization Server (mock OAuth 2.1 provider).
GET /authorize issues a fixed code bound to a PKCE challenge; POST /token redeems it once; metadata at a
configurable well-known path. Port 9000 by default.
"""
import logging

from fastapi import FastAPI, Request

from auth_server.authorize import router as authorize_router
from auth_server.config import load_config
from auth_server.logout import router as logout_router
from auth_server.registration import router as registration_router
from auth_server.store import AuthorizationRequestStore
from auth_server.token_endpoint import router as token_router
from auth_server.well_known import build_router as build_well_known_router
from oauth_testbed.config import AuthServerConfig
from oauth_testbed.errors import install_error_handlers

logger = logging.getLogger(__name__)


def create_app(config: AuthServerConfig, store: AuthorizationRequestStore | None = None) -> FastAPI:
    """Build an auth server app; each app owns its own pending-request store."""
    app = FastAPI(title="Auth Server", version="1.0.0")
    app.state.config = config
    app.state.store = store if store is not None else AuthorizationRequestStore()
    install_error_handlers(app)

    app.include_router(build_well_known_router(config), tags=["well-known"])
    app.include_router(authorize_router, tags=["authorize"])
    app.include_router(token_router, tags=["token"])
    app.include_router(registration_router, tags=["register"])
    if config.extended_metadata:
        app.include_router(logout_router, tags=["logout"])

    @app.get("/health")
    def health(request: Request):
        """Health check endpoint."""
        return {"status": "ok", "server": request.app.state.config.name}

    logger.info(
        "Auth server %s: metadata=%s require_pkce=%s extended=%s",
        config.name,
        config.metadata_path,
        config.require_pkce,
        config.extended_metadata,
    )
    return app


app = create_app(load_config())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "auth_server.main:app",
        host="127.0.0.1",
        port=9000,
        reload=True,
    )
