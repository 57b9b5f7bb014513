import logging

import requests
from django.http import HttpResponse, JsonResponse

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# requests decodes the body, so the upstream encoding/length no longer apply.
DROPPED_RESPONSE_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding", "content-length"}


def strip_prefix(path: str, prefix: str) -> str:
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
    return path if path.startswith("/") else f"/{path}"


def forward_headers(request) -> dict:
    headers = {}
    for name, value in request.headers.items():
        lowered = name.lower()
        if lowered in HOP_BY_HOP_HEADERS or lowered in ("host", "content-length"):
            continue
        headers[name] = value
    return headers


def forward(request, *, target: str, prefix: str = "/api", timeout=30):
    """Relay a request to the legacy backend unchanged apart from the path prefix."""
    url = target.rstrip("/") + strip_prefix(request.path, prefix)
    query = request.META.get("QUERY_STRING")
    if query:
        url = f"{url}?{query}"

    try:
        upstream = requests.request(
            request.method,
            url,
            headers=forward_headers(request),
            data=request.body or None,
            timeout=timeout,
            allow_redirects=False,
        )
    except requests.RequestException as exc:
        logger.exception("Pass-through request to %s failed.", url)
        return JsonResponse({"error": "Upstream request failed.", "details": str(exc)}, status=502)

    logger.info("Pass-through %s %s -> %s", request.method, url, upstream.status_code)

    response = HttpResponse(upstream.content, status=upstream.status_code)
    for name, value in upstream.headers.items():
        if name.lower() in DROPPED_RESPONSE_HEADERS:
            continue
        response[name] = value
    return response
