import logging
from collections.abc import Mapping
from dataclasses import dataclass

import requests
from django.conf import settings

from gateway.adapters import get_adapter
from gateway.errors import ClientInputError, ProviderError, UpstreamError
from gateway.routing import DEFAULT_MODULES
from gateway.serializers import LegacySearch, LegacySearchSerializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayConfig:
    legacy_target: str
    iatalocal_url: str
    duffel_url: str
    duffel_version: str = "v2"
    timeout: float = 30
    modules: tuple = DEFAULT_MODULES
    passthrough_prefix: str = "/api"

    @classmethod
    def from_settings(cls):
        return cls(
            legacy_target=getattr(settings, "PHPTRAVELS_TARGET", "https://api.phptravels.com"),
            iatalocal_url=getattr(settings, "IATA_LOCAL_SEARCH_URL", ""),
            duffel_url=getattr(settings, "DUFFEL_SEARCH_URL", ""),
            duffel_version=getattr(settings, "DUFFEL_VERSION", "v2"),
            timeout=getattr(settings, "UPSTREAM_TIMEOUT", 30),
            modules=tuple(getattr(settings, "GATEWAY_MODULES", DEFAULT_MODULES)),
            passthrough_prefix=getattr(settings, "PASSTHROUGH_PREFIX", "/api"),
        )


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    payload: object


def parse_search(body, adapter) -> LegacySearch:
    if not body or not isinstance(body, Mapping):
        raise ClientInputError("Request body is required.")

    serializer = LegacySearchSerializer(data=body)
    if not serializer.is_valid():
        raise ClientInputError("Invalid search request.", details=serializer.errors)

    search = LegacySearch.from_validated(serializer.validated_data)
    if adapter.requires_credential and not search.api_key:
        raise ClientInputError(
            f"api_key is required for {adapter.name}.",
            details={"api_key": "This field is required."},
        )
    return search


class SupplierGateway:
    """
    Adapt a legacy flight search to one supplier call.

    Received -> Mapped -> UpstreamCalled -> Normalized -> Responded, or
    Received -> Failed. Client errors answer 400 with an error body and
    never reach the supplier. Upstream failures answer 500 with an empty
    list, since the legacy caller always renders an array.
    """

    def __init__(self, config: GatewayConfig, http=None):
        self.config = config
        # Anything with a requests-style `post`; a Session or the requests module.
        self.http = http or requests

    def search(self, supplier: str, body) -> GatewayResponse:
        try:
            adapter = get_adapter(supplier)
            search = parse_search(body, adapter)
        except ClientInputError as exc:
            logger.info("Rejected %s search: %s", supplier, exc)
            return GatewayResponse(
                exc.status_code,
                {"status": False, "error": str(exc), "details": exc.details},
            )
        except ProviderError as exc:
            logger.error("Cannot adapt %s search: %s", supplier, exc)
            return GatewayResponse(exc.status_code, [])

        try:
            payload = self._request_json(adapter, search)
            itineraries = adapter.normalize_response(payload, search)
        except UpstreamError as exc:
            return GatewayResponse(exc.status_code, [])
        except Exception:
            logger.exception("Unexpected failure adapting %s search.", supplier)
            return GatewayResponse(500, [])

        logger.info("%s search returned %d itineraries.", supplier, len(itineraries))
        return GatewayResponse(200, itineraries)

    def _request_json(self, adapter, search) -> object:
        url = adapter.endpoint(self.config)
        body = adapter.map_request(search)
        headers = adapter.build_headers(search, self.config)

        try:
            response = self.http.post(url, json=body, headers=headers, timeout=self.config.timeout)
        except requests.RequestException as exc:
            logger.exception("%s request failed.", adapter.name)
            raise UpstreamError(f"{adapter.name} request failed.", details={"error": str(exc)})

        if response.status_code >= 400:
            logger.warning(
                "%s error response",
                adapter.name,
                extra={"status_code": response.status_code, "details": response.text[:500]},
            )
            raise UpstreamError(
                f"{adapter.name} returned an error.",
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError:
            raise UpstreamError(f"{adapter.name} response was not valid JSON.")
