"""
Pytest tests for GET /authorize, strict and permissive modes.
"""
from urllib.parse import parse_qs, urlsplit

from auth_server.store import AuthorizationRequest

REDIRECT_URI = "https://x/cb"
RFC_CHALLENGE = "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


def _authorize_params(**overrides):
    params = {
        "response_type": "code",
        "client_id": "c1",
        "redirect_uri": REDIRECT_URI,
        "state": "s1",
        "code_challenge": RFC_CHALLENGE,
        "code_challenge_method": "S256",
    }
    params.update(overrides)
    return {k: v for k, v in params.items() if v is not None}


# --- strict mode ---


def test_authorize_redirects_with_code_and_state(client):
    response = client.get("/authorize", params=_authorize_params(), follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://x/cb?code=test_auth_code_123&state=s1"


def test_authorize_stores_pending_request(client, app):
    client.get("/authorize", params=_authorize_params(), follow_redirects=False)
    pending = app.state.store.get("test_auth_code_123")
    assert pending == AuthorizationRequest(
        client_id="c1",
        redirect_uri=REDIRECT_URI,
        state="s1",
        code_challenge=RFC_CHALLENGE,
        code_challenge_method="S256",
    )


def test_authorize_omits_empty_state(client):
    response = client.get("/authorize", params=_authorize_params(state=None), follow_redirects=False)
    assert response.status_code == 302
    location = response.headers["location"]
    assert location == "https://x/cb?code=test_auth_code_123"
    assert "state" not in location


def test_authorize_keeps_existing_redirect_query(client):
    response = client.get(
        "/authorize",
        params=_authorize_params(redirect_uri="https://x/cb?tenant=t1"),
        follow_redirects=False,
    )
    assert response.status_code == 302
    query = parse_qs(urlsplit(response.headers["location"]).query)
    assert query == {"tenant": ["t1"], "code": ["test_auth_code_123"], "state": ["s1"]}


def test_authorize_second_request_overwrites_first(client, app):
    client.get("/authorize", params=_authorize_params(), follow_redirects=False)
    client.get(
        "/authorize",
        params=_authorize_params(client_id="c2", redirect_uri="https://y/cb", state="s2"),
        follow_redirects=False,
    )
    pending = app.state.store.get("test_auth_code_123")
    assert pending.client_id == "c2"
    assert pending.redirect_uri == "https://y/cb"
    assert len(app.state.store) == 1


def test_authorize_wrong_response_type(client):
    response = client.get("/authorize", params=_authorize_params(response_type="token"), follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "unsupported_response_type"


def test_authorize_missing_response_type(client):
    response = client.get("/authorize", params=_authorize_params(response_type=None), follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "unsupported_response_type"


def test_authorize_missing_code_challenge(client, app):
    response = client.get("/authorize", params=_authorize_params(code_challenge=None), follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"
    assert len(app.state.store) == 0


def test_authorize_plain_method_rejected(client):
    response = client.get(
        "/authorize",
        params=_authorize_params(code_challenge_method="plain"),
        follow_redirects=False,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"
    assert "S256" in response.json()["error_description"]


def test_authorize_missing_redirect_uri(client):
    response = client.get("/authorize", params=_authorize_params(redirect_uri=None), follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


def test_authorize_relative_redirect_uri(client):
    response = client.get("/authorize", params=_authorize_params(redirect_uri="/cb"), follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


# --- permissive mode ---


def test_permissive_missing_redirect_uri_is_plain_text(permissive_client):
    response = permissive_client.get("/authorize", params={"client_id": "c1"}, follow_redirects=False)
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "redirect_uri is required"


def test_permissive_without_pkce_redirects(permissive_client, permissive_app):
    response = permissive_client.get(
        "/authorize",
        params={"redirect_uri": REDIRECT_URI, "state": "abc"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    assert response.headers["location"] == "https://x/cb?code=test_auth_code_123&state=abc"
    pending = permissive_app.state.store.get("test_auth_code_123")
    assert pending.code_challenge == ""
    assert pending.client_id == ""


def test_permissive_accepts_plain_method(permissive_client, permissive_app):
    response = permissive_client.get(
        "/authorize",
        params=_authorize_params(code_challenge="my-plain-verifier", code_challenge_method="plain"),
        follow_redirects=False,
    )
    assert response.status_code == 302
    assert permissive_app.state.store.get("test_auth_code_123").code_challenge_method == "plain"


def test_permissive_rejects_unknown_method(permissive_client):
    response = permissive_client.get(
        "/authorize",
        params=_authorize_params(code_challenge_method="S512"),
        follow_redirects=False,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


def test_permissive_rejects_wrong_response_type(permissive_client):
    response = permissive_client.get(
        "/authorize",
        params=_authorize_params(response_type="token"),
        follow_redirects=False,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "unsupported_response_type"


def test_permissive_challenge_without_method_defaults_to_s256(permissive_client, permissive_app):
    permissive_client.get(
        "/authorize",
        params=_authorize_params(code_challenge_method=None),
        follow_redirects=False,
    )
    assert permissive_app.state.store.get("test_auth_code_123").code_challenge_method == "S256"


# --- health ---


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "server": "mock-auth-server"}
