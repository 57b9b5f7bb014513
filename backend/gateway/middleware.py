import logging

logger = logging.getLogger("gateway.requests")

MAX_LOGGED_BODY = 5000


def _content_length(request) -> int:
    try:
        return int(request.META.get("CONTENT_LENGTH") or 0)
    except ValueError:
        return 0


def _small_text(raw: bytes) -> str | None:
    if not raw or len(raw) >= MAX_LOGGED_BODY:
        return None
    return raw.decode("utf-8", errors="replace")


class RequestLoggingMiddleware:
    """Log each incoming request and the response sent back for it."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        logger.info("--- Incoming Request --- %s %s", request.method, request.get_full_path())
        if request.GET:
            logger.info("Query: %s", request.GET.dict())
        # Large or multipart bodies are left unread for the view.
        length = _content_length(request)
        if 0 < length < MAX_LOGGED_BODY and not request.content_type.startswith("multipart/"):
            body = _small_text(request.body)
            if body:
                logger.info("Body: %s", body)

        response = self.get_response(request)

        logger.info("--- Outgoing Response --- %s", response.status_code)
        if not getattr(response, "streaming", False):
            body = _small_text(response.content)
            if body:
                logger.info("Body: %s", body)
        return response
