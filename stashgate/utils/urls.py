from fastapi import Request

from stashgate.core.config import settings


def _forwarded_origin(header: str) -> str | None:
    """Parse ``proto`` and ``host`` out of an RFC 7239 ``Forwarded`` header."""
    fields = {}
    for part in header.split(",")[0].split(";"):
        name, sep, value = part.partition("=")
        if sep:
            fields[name.strip().lower()] = value.strip().strip('"')
    if fields.get("proto") and fields.get("host"):
        return f"{fields['proto']}://{fields['host']}"
    return None


def external_base_url(request: Request) -> str:
    """Origin clients should use to reach this service.

    ``PUBLIC_BASE_URL`` wins; otherwise proxy headers, then the request itself.
    """
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")

    forwarded = request.headers.get("forwarded")
    origin = _forwarded_origin(forwarded) if forwarded else None
    if origin:
        return origin.rstrip("/")

    proto = request.headers.get("x-forwarded-proto")
    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    if proto and host:
        return f"{proto}://{host}".rstrip("/")

    return str(request.base_url).rstrip("/")


def build_share_url(request: Request, token: str) -> str:
    return f"{external_base_url(request)}/share/{token}"
