"""
In-memory store of pending authorization requests (code -> AuthorizationRequest).
Owned by one app instance; a lock makes redemption (lookup, validate, delete) atomic per code.
No TTL: a request that is never redeemed stays until overwritten.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from oauth_testbed.errors import oauth_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizationRequest:
    client_id: str
    redirect_uri: str
    state: str
    code_challenge: str
    code_challenge_method: str


class AuthorizationRequestStore:
    def __init__(self) -> None:
        self._pending: dict[str, AuthorizationRequest] = {}
        self._lock = threading.Lock()

    def put(self, code: str, auth_request: AuthorizationRequest) -> None:
        """Store auth_request under code, replacing any request already pending for it."""
        with self._lock:
            replaced = code in self._pending
            self._pending[code] = auth_request
        if replaced:
            logger.info("Replaced pending authorization request for client_id=%s", auth_request.client_id)

    def get(self, code: str) -> AuthorizationRequest | None:
        with self._lock:
            return self._pending.get(code)

    def redeem(
        self,
        code: str,
        validate: Callable[[AuthorizationRequest], None] | None = None,
    ) -> AuthorizationRequest:
        """
        Single-use redemption. Raises invalid_grant if nothing is pending for code.
        validate may raise to reject the redemption; the request then stays pending.
        Only one concurrent caller can succeed for a given code.
        """
        with self._lock:
            auth_request = self._pending.get(code)
            if auth_request is None:
                raise oauth_error(400, "invalid_grant", "Authorization code not found or already used")
            if validate is not None:
                validate(auth_request)
            del self._pending[code]
            return auth_request

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


def get_store(request: Request) -> AuthorizationRequestStore:
    """Dependency: the store owned by the running app."""
    return request.app.state.store
