from dataclasses import dataclass

PASSTHROUGH = "passthrough"

DEFAULT_MODULES = ("duffel", "iatalocal")


@dataclass(frozen=True)
class Route:
    kind: str
    supplier: str | None = None

    @property
    def is_passthrough(self) -> bool:
        return self.kind == PASSTHROUGH


def classify(path: str, modules=DEFAULT_MODULES) -> Route:
    """
    Decide whether a request is adapted by a supplier or forwarded as-is.

    Matching is on the lower-cased path: "/api/Flights/IATALocal/search"
    routes to the iatalocal adapter.
    """
    normalized = (path or "").lower() + "/"
    for module in modules:
        if f"/flights/{module.lower()}/" in normalized:
            return Route(kind="adapt", supplier=module.lower())
    return Route(kind=PASSTHROUGH)
