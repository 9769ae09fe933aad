"""
Fixed values shared by the authorization server and the resource server.
These are test-double secrets: both servers know them out of band, nothing verifies them cryptographically.
"""

FIXED_AUTH_CODE = "test_auth_code_123"
FIXED_ACCESS_TOKEN = "test_access_token_abc"
FIXED_REFRESH_TOKEN = "test_refresh_token_xyz"
FIXED_CLIENT_ID = "test_client_id"
FIXED_CLIENT_SECRET = "test_client_secret"

# Advertised only; access tokens never actually expire
TOKEN_EXPIRES_IN = 3600

AS_METADATA_PATH = "/.well-known/oauth-authorization-server"
RS_METADATA_PATH = "/.well-known/oauth-protected-resource"

DEFAULT_AUTH_SERVER_URL = "http://127.0.0.1:9000"

# JSON-RPC error codes used by the resource server
JSONRPC_AUTH_REQUIRED = -32001
JSONRPC_INVALID_REQUEST = -32600
JSONRPC_METHOD_NOT_FOUND = -32601
JSONRPC_INVALID_PARAMS = -32602
JSONRPC_INTERNAL_ERROR = -32603
