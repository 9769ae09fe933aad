"""
Bearer-token gate for the protected endpoint.
Tokens are compared against the fixed configured access token; no call back to the authorization server.
Failures are JSON-RPC error envelopes with 401; the first one optionally carries the
resource_metadata challenge so clients can discover the authorization server.
"""
import logging
import secrets

from fastapi import Depends, HTTPException, Request, status

from oauth_testbed.config import ResourceServerConfig
from oauth_testbed.constants import JSONRPC_AUTH_REQUIRED
from oauth_testbed.errors import jsonrpc_error
from oauth_testbed.urls import base_url
from resource_server.config import get_config

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def resource_metadata_url(request: Request, config: ResourceServerConfig) -> str:
    """Absolute URL of this server's protected resource metadata document."""
    return f"{base_url(request, config.public_scheme)}{config.metadata_path}"


def challenge_headers(request: Request, config: ResourceServerConfig) -> dict[str, str] | None:
    if not config.include_www_authenticate:
        return None
    return {"WWW-Authenticate": f'Bearer resource_metadata="{resource_metadata_url(request, config)}"'}


def require_access_token(
    request: Request,
    config: ResourceServerConfig = Depends(get_config),
) -> str:
    """Dependency: the presented bearer token, if it is the configured access token. Raises 401 otherwise."""
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        logger.info("Unauthenticated request to %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=jsonrpc_error(JSONRPC_AUTH_REQUIRED, "Authentication required"),
            headers=challenge_headers(request, config),
        )
    token = header[len(BEARER_PREFIX):]
    if not secrets.compare_digest(token.encode("utf-8"), config.access_token.encode("utf-8")):
        logger.warning("Rejected bearer token on %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=jsonrpc_error(JSONRPC_AUTH_REQUIRED, "Invalid token"),
        )
    return token
