"""
Well-known endpoints: OAuth Authorization Server Metadata (RFC 8414) at a configurable path, and a JWKS stub.
The issuer is derived from the Host header on every request unless an override is configured.
"""
from fastapi import APIRouter, Request

from auth_server.pkce import METHOD_PLAIN, METHOD_S256
from oauth_testbed.config import AuthServerConfig
from oauth_testbed.urls import base_url

# Illustrative only; cannot verify any signature
JWKS_STUB = {
    "keys": [
        {
            "kty": "RSA",
            "use": "sig",
            "kid": "test-key-1",
            "alg": "RS256",
            "n": "xGOr-H7A-PWG",
            "e": "AQAB",
        }
    ]
}


def authorization_server_metadata(config: AuthServerConfig, base: str) -> dict:
    """Discovery document for base ('<scheme>://<host>')."""
    issuer = config.issuer or f"{base}{config.tenant_path}"
    methods = [METHOD_S256] if config.require_pkce else [METHOD_PLAIN, METHOD_S256]
    metadata = {
        "issuer": issuer,
        "authorization_endpoint": f"{base}/authorize",
        "token_endpoint": f"{base}/token",
        "registration_endpoint": f"{base}/register",
        "response_types_supported": ["code"],
        "grant_types_supported": ["authorization_code", "refresh_token"],
        "code_challenge_methods_supported": methods,
        "token_endpoint_auth_methods_supported": ["none", "client_secret_post"],
    }
    if config.extended_metadata:
        metadata.update(
            {
                "jwks_uri": f"{base}/jwks",
                "subject_types_supported": ["public"],
                "id_token_signing_alg_values_supported": ["RS256"],
                "scopes_supported": ["openid", "profile", "email", "offline_access"],
                "token_endpoint_auth_methods_supported": ["client_secret_basic", "client_secret_post"],
                "claims_supported": ["sub", "name", "email"],
                "response_modes_supported": ["query", "fragment"],
                "authorization_response_iss_parameter_supported": True,
                "backchannel_logout_supported": False,
                "frontchannel_logout_supported": False,
                "end_session_endpoint": f"{base}/logout",
                "request_parameter_supported": False,
                "request_uri_parameter_supported": False,
            }
        )
    return metadata


def build_router(config: AuthServerConfig) -> APIRouter:
    """Metadata lives at config.metadata_path, so routes are registered per app."""
    router = APIRouter()

    def oauth_authorization_server(request: Request):
        """OAuth Authorization Server Metadata."""
        return authorization_server_metadata(config, base_url(request, config.public_scheme))

    router.add_api_route(config.metadata_path, oauth_authorization_server, methods=["GET"])

    if config.extended_metadata:

        def jwks():
            """Static JWKS stub."""
            return JWKS_STUB

        router.add_api_route("/jwks", jwks, methods=["GET"])
    return router
