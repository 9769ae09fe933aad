"""
Pytest configuration for auth_server. Each test gets a fresh app (and so a fresh pending-request store).
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode

import pytest
from fastapi.testclient import TestClient

from auth_server.main import create_app
from oauth_testbed.config import AuthServerConfig


@pytest.fixture
def pkce_pair():
    """Fresh (code_verifier, code_challenge) pair."""
    verifier = secrets.token_urlsafe(32)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return verifier, challenge


@pytest.fixture
def strict_config():
    return AuthServerConfig.create()


@pytest.fixture
def permissive_config():
    return AuthServerConfig.create(require_pkce=False, extended_metadata=True)


@pytest.fixture
def app(strict_config):
    return create_app(strict_config)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def permissive_app(permissive_config):
    return create_app(permissive_config)


@pytest.fixture
def permissive_client(permissive_app):
    return TestClient(permissive_app)
