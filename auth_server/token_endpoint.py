"""
Token endpoint (POST /token). authorization_code grant (single-use, PKCE-checked) and refresh_token grant.
Accepts form-encoded or JSON bodies. Tokens are the fixed configured values; refresh does not rotate.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData

from auth_server.config import get_config
from auth_server.pkce import verify_code_verifier
from auth_server.store import AuthorizationRequest, AuthorizationRequestStore, get_store
from oauth_testbed.config import AuthServerConfig
from oauth_testbed.errors import oauth_error

logger = logging.getLogger(__name__)
router = APIRouter()

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_token_params(request: Request) -> dict[str, str]:
    """Token request parameters from a form or JSON body. Non-string JSON values are ignored."""
    content_type = request.headers.get("content-type", "").lower()
    if any(t in content_type for t in _FORM_TYPES):
        form: FormData = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise oauth_error(400, "invalid_request", "Request body must be form-encoded or a JSON object")
    if not isinstance(body, dict):
        raise oauth_error(400, "invalid_request", "Request body must be form-encoded or a JSON object")
    return {k: v for k, v in body.items() if isinstance(v, str)}


def _token_response(config: AuthServerConfig) -> dict:
    return {
        "access_token": config.access_token,
        "token_type": "Bearer",
        "expires_in": config.expires_in,
        "refresh_token": config.refresh_token,
        "scope": config.token_scope,
    }


@router.post("/token")
async def token(
    request: Request,
    config: AuthServerConfig = Depends(get_config),
    store: AuthorizationRequestStore = Depends(get_store),
):
    """
    authorization_code: exchange the fixed code (with matching redirect_uri and PKCE verifier) for tokens.
    refresh_token: exchange the fixed refresh token for the same token pair.
    """
    params = await read_token_params(request)
    grant_type = params.get("grant_type")
    if grant_type == "authorization_code":
        return _token_authorization_code(
            code=params.get("code"),
            redirect_uri=params.get("redirect_uri"),
            code_verifier=params.get("code_verifier"),
            config=config,
            store=store,
        )
    if grant_type == "refresh_token":
        return _token_refresh_token(refresh_token=params.get("refresh_token"), config=config)
    logger.warning("token request rejected: unsupported grant_type=%s", grant_type)
    raise oauth_error(400, "unsupported_grant_type", "Grant type not supported")


def _token_authorization_code(
    code: str | None,
    redirect_uri: str | None,
    code_verifier: str | None,
    config: AuthServerConfig,
    store: AuthorizationRequestStore,
):
    if code != config.auth_code:
        logger.warning("authorization_code grant rejected: unknown code")
        raise oauth_error(400, "invalid_grant", "Invalid authorization code")

    def validate(auth_request: AuthorizationRequest) -> None:
        if redirect_uri != auth_request.redirect_uri:
            logger.warning("authorization_code grant rejected: redirect_uri mismatch")
            raise oauth_error(400, "invalid_grant", "Redirect URI mismatch")
        # Permissive /authorize may store a request without a challenge; nothing to verify then
        if not auth_request.code_challenge and not config.require_pkce:
            return
        if not verify_code_verifier(
            code_verifier,
            auth_request.code_challenge,
            auth_request.code_challenge_method,
            allow_plain=not config.require_pkce,
        ):
            logger.warning("authorization_code grant rejected: PKCE verification failed")
            raise oauth_error(400, "invalid_grant", "Invalid PKCE code verifier")

    auth_request = store.redeem(code, validate)
    logger.info("authorization_code grant: tokens issued for client_id=%s", auth_request.client_id)
    return _token_response(config)


def _token_refresh_token(refresh_token: str | None, config: AuthServerConfig):
    if refresh_token != config.refresh_token:
        logger.warning("refresh_token grant rejected: invalid refresh token")
        raise oauth_error(400, "invalid_grant", "Invalid refresh token")
    logger.info("refresh_token grant: new access token issued (no rotation)")
    return _token_response(config)
