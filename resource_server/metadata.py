"""
RFC 9728 OAuth Protected Resource Metadata.
Tells clients which authorization server protects this resource.
"""
from dataclasses import dataclass, field

from fastapi import APIRouter, Request

from oauth_testbed.config import ResourceServerConfig
from oauth_testbed.urls import base_url


@dataclass
class ProtectedResourceMetadata:
    # Required: the resource identifier (this server's URL)
    resource: str

    # Required: authorization servers that can issue tokens for it
    authorization_servers: list[str]

    scopes_supported: list[str] = field(default_factory=list)
    bearer_methods_supported: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize metadata to dictionary for JSON response."""
        result = {
            "resource": self.resource,
            "authorization_servers": self.authorization_servers,
        }
        if self.scopes_supported:
            result["scopes_supported"] = self.scopes_supported
        if self.bearer_methods_supported:
            result["bearer_methods_supported"] = self.bearer_methods_supported
        return result


def metadata_for_request(request: Request, config: ResourceServerConfig) -> ProtectedResourceMetadata:
    return ProtectedResourceMetadata(
        resource=config.resource_url or base_url(request, config.public_scheme),
        authorization_servers=config.authorization_servers,
    )


def build_router(config: ResourceServerConfig) -> APIRouter:
    """The metadata location is configurable, so the route is registered per app."""
    router = APIRouter()

    def oauth_protected_resource(request: Request):
        """OAuth Protected Resource Metadata."""
        return metadata_for_request(request, config).to_dict()

    router.add_api_route(config.metadata_path, oauth_protected_resource, methods=["GET"])
    return router
