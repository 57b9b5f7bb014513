from gateway.errors import ProviderError
from gateway.adapters.duffel import DuffelAdapter
from gateway.adapters.iatalocal import IataLocalAdapter

ADAPTERS = {
    "duffel": DuffelAdapter,
    "iatalocal": IataLocalAdapter,
}


def get_adapter(name):
    """Return the adapter instance registered for a supplier module."""

    supplier = str(name or "").strip().lower()

    aliases = {
        "iata-local": "iatalocal",
        "iata_local": "iatalocal",
    }

    supplier = aliases.get(supplier, supplier)

    adapter_cls = ADAPTERS.get(supplier)
    if adapter_cls is None:
        raise ProviderError(f"Unknown flights supplier: {supplier}", status_code=500)

    return adapter_cls()
