"""
Authorization endpoint. GET /authorize validates the request, stores it under the fixed code and
redirects straight back to the client: no login or consent step, this is a deterministic test double.
Strict mode requires PKCE S256; permissive mode only requires redirect_uri.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from auth_server.config import get_config
from auth_server.pkce import METHOD_PLAIN, METHOD_S256
from auth_server.store import AuthorizationRequest, AuthorizationRequestStore, get_store
from oauth_testbed.config import AuthServerConfig
from oauth_testbed.errors import oauth_error
from oauth_testbed.urls import add_query_params, is_absolute_uri

logger = logging.getLogger(__name__)
router = APIRouter()


def _validate_strict(
    response_type: str | None,
    redirect_uri: str | None,
    code_challenge: str | None,
    code_challenge_method: str | None,
) -> None:
    if response_type != "code":
        raise oauth_error(400, "unsupported_response_type", "Only code response type is supported")
    if not code_challenge or code_challenge_method != METHOD_S256:
        raise oauth_error(400, "invalid_request", "PKCE is required with S256 method")
    if not is_absolute_uri(redirect_uri):
        raise oauth_error(400, "invalid_request", "redirect_uri must be an absolute URI")


@router.get("/authorize")
def authorize(
    response_type: str | None = None,
    client_id: str | None = None,
    redirect_uri: str | None = None,
    state: str | None = None,
    code_challenge: str | None = None,
    code_challenge_method: str | None = None,
    config: AuthServerConfig = Depends(get_config),
    store: AuthorizationRequestStore = Depends(get_store),
):
    """
    Issue the fixed authorization code for this request and redirect to
    redirect_uri?code=...&state=... (state only when non-empty).
    Overwrites any request already pending for the code.
    """
    if config.require_pkce:
        _validate_strict(response_type, redirect_uri, code_challenge, code_challenge_method)
    else:
        if not redirect_uri:
            return PlainTextResponse("redirect_uri is required", status_code=400)
        if response_type is not None and response_type != "code":
            raise oauth_error(400, "unsupported_response_type", "Only code response type is supported")
        if not is_absolute_uri(redirect_uri):
            return PlainTextResponse("redirect_uri must be an absolute URI", status_code=400)
        if code_challenge_method and code_challenge_method not in (METHOD_S256, METHOD_PLAIN):
            raise oauth_error(400, "invalid_request", "code_challenge_method must be S256 or plain")

    store.put(
        config.auth_code,
        AuthorizationRequest(
            client_id=client_id or "",
            redirect_uri=redirect_uri,
            state=state or "",
            code_challenge=code_challenge or "",
            code_challenge_method=code_challenge_method or (METHOD_S256 if code_challenge else ""),
        ),
    )
    logger.info("Authorization code issued for client_id=%s redirect_uri=%s", client_id, redirect_uri)

    params = {"code": config.auth_code}
    if state:
        params["state"] = state
    return RedirectResponse(url=add_query_params(redirect_uri, params), status_code=302)
