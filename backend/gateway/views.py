from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework.exceptions import ParseError, UnsupportedMediaType
from rest_framework.response import Response
from rest_framework.views import APIView

from gateway.proxy import forward
from gateway.routing import classify
from gateway.services.gateway import GatewayConfig, SupplierGateway


def index(request):
    return HttpResponse("OTA Proxy Server Running", content_type="text/plain")


class HealthView(APIView):
    def get(self, request):
        return Response({"status": "ok"})


class SupplierSearchView(APIView):
    def post(self, request, supplier):
        try:
            body = request.data
        except (ParseError, UnsupportedMediaType):
            body = None

        gateway = SupplierGateway(GatewayConfig.from_settings())
        result = gateway.search(supplier, body)
        return Response(result.payload, status=result.status_code)


supplier_search = SupplierSearchView.as_view()


@csrf_exempt
def api_entry(request, path=""):
    """Adapt requests for supplier modules; forward everything else to the legacy backend."""
    config = GatewayConfig.from_settings()
    route = classify(request.path, config.modules)

    if route.is_passthrough:
        return forward(
            request,
            target=config.legacy_target,
            prefix=config.passthrough_prefix,
            timeout=config.timeout,
        )

    return supplier_search(request, supplier=route.supplier)
