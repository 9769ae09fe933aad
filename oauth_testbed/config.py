"""
Server configuration: one tagged variant per role (auth | resource), immutable after startup.
Values come from the environment; defaults match the fixed test-double constants.
"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Mapping

from oauth_testbed.constants import (
    AS_METADATA_PATH,
    DEFAULT_AUTH_SERVER_URL,
    FIXED_ACCESS_TOKEN,
    FIXED_AUTH_CODE,
    FIXED_CLIENT_ID,
    FIXED_CLIENT_SECRET,
    FIXED_REFRESH_TOKEN,
    RS_METADATA_PATH,
    TOKEN_EXPIRES_IN,
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ServerRole(str, Enum):
    AUTH = "auth"
    RESOURCE = "resource"


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse an env flag. Empty or unset means default; unknown values are a startup error."""
    if value is None or not value.strip():
        return default
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def normalize_path(path: str | None) -> str:
    """'tenant1/' -> '/tenant1'; empty -> ''."""
    if not path or not path.strip("/ "):
        return ""
    return "/" + path.strip().strip("/")


def _get(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class AuthServerConfig:
    role: ClassVar[ServerRole] = ServerRole.AUTH

    name: str = "mock-auth-server"
    issuer: str | None = None
    tenant_path: str = ""
    metadata_path: str = AS_METADATA_PATH
    # Strict: PKCE S256 required at /authorize. Permissive: only redirect_uri required.
    require_pkce: bool = True
    # Extended: full discovery document plus /jwks and /logout
    extended_metadata: bool = False
    token_scope: str = "mcp"
    public_scheme: str = "https"
    auth_code: str = FIXED_AUTH_CODE
    access_token: str = FIXED_ACCESS_TOKEN
    refresh_token: str = FIXED_REFRESH_TOKEN
    client_id: str = FIXED_CLIENT_ID
    client_secret: str = FIXED_CLIENT_SECRET
    expires_in: int = TOKEN_EXPIRES_IN

    @classmethod
    def create(
        cls,
        *,
        tenant_path: str | None = None,
        metadata_path: str | None = None,
        token_scope: str | None = None,
        **kwargs,
    ) -> "AuthServerConfig":
        """Build a config, deriving the tenant-scoped metadata path and the token scope when not given."""
        tenant = normalize_path(tenant_path)
        path = normalize_path(metadata_path) or f"{AS_METADATA_PATH}{tenant}"
        if not token_scope:
            token_scope = "openid profile email" if kwargs.get("extended_metadata") else "mcp"
        return cls(tenant_path=tenant, metadata_path=path, token_scope=token_scope, **kwargs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AuthServerConfig":
        env = os.environ if environ is None else environ
        issuer = _get(env, "OAUTH_ISSUER")
        return cls.create(
            name=_get(env, "OAUTH_SERVER_NAME") or "mock-auth-server",
            issuer=issuer.rstrip("/") if issuer else None,
            tenant_path=_get(env, "OAUTH_TENANT_PATH"),
            metadata_path=_get(env, "OAUTH_AS_METADATA_PATH"),
            require_pkce=parse_bool(env.get("OAUTH_REQUIRE_PKCE"), True),
            extended_metadata=parse_bool(env.get("OAUTH_EXTENDED_METADATA"), False),
            token_scope=_get(env, "OAUTH_TOKEN_SCOPE"),
            public_scheme=_get(env, "OAUTH_PUBLIC_SCHEME") or "https",
            auth_code=_get(env, "OAUTH_AUTH_CODE") or FIXED_AUTH_CODE,
            access_token=_get(env, "OAUTH_ACCESS_TOKEN") or FIXED_ACCESS_TOKEN,
            refresh_token=_get(env, "OAUTH_REFRESH_TOKEN") or FIXED_REFRESH_TOKEN,
            client_id=_get(env, "OAUTH_CLIENT_ID") or FIXED_CLIENT_ID,
            client_secret=_get(env, "OAUTH_CLIENT_SECRET") or FIXED_CLIENT_SECRET,
            expires_in=int(_get(env, "OAUTH_TOKEN_EXPIRES") or TOKEN_EXPIRES_IN),
        )


@dataclass(frozen=True)
class ResourceServerConfig:
    role: ClassVar[ServerRole] = ServerRole.RESOURCE

    name: str = "mcp-resource-server"
    metadata_path: str = RS_METADATA_PATH
    auth_server_url: str = DEFAULT_AUTH_SERVER_URL
    tenant_path: str = ""
    # Clients are tested under both challenge styles, so the header is a toggle
    include_www_authenticate: bool = True
    resource_url: str | None = None
    public_scheme: str = "https"
    access_token: str = FIXED_ACCESS_TOKEN

    @classmethod
    def create(
        cls,
        *,
        auth_server_url: str = DEFAULT_AUTH_SERVER_URL,
        tenant_path: str | None = None,
        metadata_path: str | None = None,
        **kwargs,
    ) -> "ResourceServerConfig":
        return cls(
            auth_server_url=auth_server_url.rstrip("/"),
            tenant_path=normalize_path(tenant_path),
            metadata_path=normalize_path(metadata_path) or RS_METADATA_PATH,
            **kwargs,
        )

    @property
    def authorization_servers(self) -> list[str]:
        return [f"{self.auth_server_url}{self.tenant_path}"]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ResourceServerConfig":
        env = os.environ if environ is None else environ
        resource_url = _get(env, "OAUTH_RESOURCE_URL")
        return cls.create(
            name=_get(env, "OAUTH_SERVER_NAME") or "mcp-resource-server",
            metadata_path=_get(env, "OAUTH_RESOURCE_METADATA_PATH"),
            auth_server_url=_get(env, "OAUTH_AUTH_SERVER_URL") or DEFAULT_AUTH_SERVER_URL,
            tenant_path=_get(env, "OAUTH_TENANT_PATH"),
            include_www_authenticate=parse_bool(env.get("OAUTH_INCLUDE_WWW_AUTHENTICATE"), True),
            resource_url=resource_url.rstrip("/") if resource_url else None,
            public_scheme=_get(env, "OAUTH_PUBLIC_SCHEME") or "https",
            access_token=_get(env, "OAUTH_ACCESS_TOKEN") or FIXED_ACCESS_TOKEN,
        )


ServerConfig = AuthServerConfig | ResourceServerConfig


def load_config(role: ServerRole | str, environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Build the config variant for role from the environment."""
    role = ServerRole(role)
    if role is ServerRole.AUTH:
        return AuthServerConfig.from_env(environ)
    return ResourceServerConfig.from_env(environ)
