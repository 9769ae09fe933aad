"""
Resource server configuration. Values come from the environment (OAUTH_* variables);
see oauth_testbed.config for names and defaults.
"""
from fastapi import Request

from oauth_testbed.config import ResourceServerConfig


def load_config() -> ResourceServerConfig:
    return ResourceServerConfig.from_env()


def get_config(request: Request) -> ResourceServerConfig:
    """Dependency: the config the running app was built with."""
    return request.app.state.config
