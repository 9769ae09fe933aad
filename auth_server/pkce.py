"""
PKCE (RFC 7636) verification. S256 always; plain only when the server runs permissive.
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode

METHOD_S256 = "S256"
METHOD_PLAIN = "plain"


def s256_challenge(code_verifier: str) -> str:
    """base64url(SHA256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def verify_code_verifier(
    code_verifier: str | None,
    code_challenge: str | None,
    method: str | None = METHOD_S256,
    *,
    allow_plain: bool = False,
) -> bool:
    if not code_verifier or not code_challenge:
        return False
    method = method or METHOD_S256
    if method == METHOD_S256:
        try:
            computed = s256_challenge(code_verifier)
        except UnicodeEncodeError:
            return False
        return secrets.compare_digest(computed.encode("ascii"), code_challenge.encode("utf-8"))
    if method == METHOD_PLAIN and allow_plain:
        return secrets.compare_digest(code_verifier.encode("utf-8"), code_challenge.encode("utf-8"))
    return False
