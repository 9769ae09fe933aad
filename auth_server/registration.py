"""
Dynamic client registration (POST /register). Returns one static client record; nothing is persisted.
"""
import logging
import time
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from auth_server.config import get_config
from oauth_testbed.config import AuthServerConfig

logger = logging.getLogger(__name__)
router = APIRouter()


class ClientRegistrationRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Echoed as sent; registration never rejects a body for its field types
    client_name: Any = None
    redirect_uris: Any = None
    scope: Any = None


@router.post("/register")
def register(
    registration: ClientRegistrationRequest | None = None,
    config: AuthServerConfig = Depends(get_config),
):
    """Always succeeds: 201 in the base variant, 200 with issue/expiry fields in the extended one."""
    registration = registration or ClientRegistrationRequest()
    client = {
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "client_name": registration.client_name or "Test Client",
        "redirect_uris": registration.redirect_uris or [],
        "grant_types": ["authorization_code", "refresh_token"],
        "response_types": ["code"],
        "scope": registration.scope or config.token_scope,
    }
    logger.info("Client registration for client_name=%s (static client returned)", client["client_name"])
    if not config.extended_metadata:
        client["token_endpoint_auth_method"] = "client_secret_post"
        return JSONResponse(client, status_code=201)
    client.update(
        {
            "client_id_issued_at": int(time.time()),
            "client_secret_expires_at": 0,
            "token_endpoint_auth_method": "client_secret_basic",
        }
    )
    return JSONResponse(client, status_code=200)
