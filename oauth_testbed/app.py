"""
Single entry point for both servers: create_app() dispatches on the config variant,
main() runs one server under uvicorn with its config taken from the environment.
"""
import argparse
import logging

from fastapi import FastAPI

from oauth_testbed.config import AuthServerConfig, ResourceServerConfig, ServerConfig, ServerRole, load_config

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {ServerRole.AUTH: 9000, ServerRole.RESOURCE: 7000}


def create_app(config: ServerConfig) -> FastAPI:
    # Lazy: each server module builds its env-configured app on import
    if isinstance(config, AuthServerConfig):
        from auth_server.main import create_app as create_auth_app

        return create_auth_app(config)
    if isinstance(config, ResourceServerConfig):
        from resource_server.main import create_app as create_resource_app

        return create_resource_app(config)
    raise TypeError(f"Unsupported server config: {type(config).__name__}")


def _log_endpoints(config: ServerConfig, host: str, port: int) -> None:
    base = f"http://{host}:{port}"
    if isinstance(config, AuthServerConfig):
        logger.info("Auth server (%s) running at %s", config.name, base)
        logger.info("  Metadata: %s%s", base, config.metadata_path)
        logger.info("  Authorize: %s/authorize", base)
        logger.info("  Token: %s/token", base)
    else:
        logger.info("Resource server (%s) running at %s", config.name, base)
        logger.info("  MCP: %s/mcp", base)
        logger.info("  Metadata: %s%s", base, config.metadata_path)
        logger.info("  Auth server: %s", config.authorization_servers[0])
    logger.info("  Health: %s/health", base)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the mock authorization server or the protected resource server")
    parser.add_argument("--role", choices=[r.value for r in ServerRole], default=ServerRole.RESOURCE.value)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    role = ServerRole(args.role)
    config = load_config(role)
    port = args.port or DEFAULT_PORTS[role]
    _log_endpoints(config, args.host, port)

    import uvicorn

    uvicorn.run(create_app(config), host=args.host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
