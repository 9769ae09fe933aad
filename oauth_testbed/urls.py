"""
Absolute URLs derived from the request's Host header. Computed per request: the host may vary.
"""
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import Request


def base_url(request: Request, scheme: str = "https") -> str:
    """'<scheme>://<host>' using the Host header, falling back to the request URL."""
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"


def is_absolute_uri(uri: str | None) -> bool:
    if not uri:
        return False
    parts = urlsplit(uri)
    return bool(parts.scheme and parts.netloc)


def add_query_params(uri: str, params: dict[str, str]) -> str:
    """Set params on uri, keeping any existing query parameters that are not overridden."""
    parts = urlsplit(uri)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend(params.items())
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))
