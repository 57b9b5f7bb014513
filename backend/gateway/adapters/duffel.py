import logging
from decimal import Decimal

from gateway.adapters.base import FlightAdapter
from gateway.errors import MappingError
from gateway.services.mapping import build_passengers, build_slices
from gateway.services.normalize import (
    NO_BAGGAGE,
    format_iso_duration,
    make_segment,
    money,
    split_timestamp,
    to_decimal,
)
from gateway.services.pairing import group_by_slot

logger = logging.getLogger(__name__)

SUPPLIER = "duffel"


def _baggage(segment: dict, baggage_type: str) -> str:
    """Quantity of `baggage_type` allowed for the first passenger on a segment."""
    passengers = segment.get("passengers")
    if not isinstance(passengers, list) or not passengers or not isinstance(passengers[0], dict):
        return NO_BAGGAGE
    for item in passengers[0].get("baggages") or []:
        if isinstance(item, dict) and item.get("type") == baggage_type:
            return f"{item.get('quantity', 0)} piece(s)"
    return NO_BAGGAGE


def _cabin_class(segment: dict, default: str) -> str:
    passengers = segment.get("passengers")
    if isinstance(passengers, list) and passengers and isinstance(passengers[0], dict):
        return passengers[0].get("cabin_class") or default
    return default


def _place(segment: dict, field: str) -> dict:
    place = segment.get(field)
    if not isinstance(place, dict) or not place.get("iata_code"):
        raise MappingError(f"Segment {field} has no airport code.")
    return place


def _carrier(segment: dict) -> dict:
    carrier = segment.get("marketing_carrier") or segment.get("operating_carrier")
    return carrier if isinstance(carrier, dict) else {}


def _pax_prices(total: Decimal, search) -> dict:
    share = total / max(search.passenger_count, 1)
    return {
        "adult_price": money(share) if search.adults else "0.00",
        "child_price": money(share) if search.children else "0.00",
        "infant_price": money(share) if search.infants else "0.00",
    }


def _refundable(offer: dict) -> bool:
    conditions = offer.get("conditions")
    if not isinstance(conditions, dict):
        return False
    refund = conditions.get("refund_before_departure")
    return bool(isinstance(refund, dict) and refund.get("allowed"))


def _offer_entries(offer: dict, search) -> list[tuple]:
    if not isinstance(offer, dict):
        raise MappingError("Offer is not an object.")
    offer_id = offer.get("id")
    slices = offer.get("slices")
    if not offer_id or not isinstance(slices, list) or not slices:
        raise MappingError("Offer is missing id or slices.")

    total = to_decimal(offer.get("total_amount"))
    base = offer.get("base_amount")
    currency = offer.get("total_currency") or search.currency
    passengers = offer.get("passengers") if isinstance(offer.get("passengers"), list) else []

    prices = {
        "currency": currency,
        "price": money(total),
        "actual_price": money(base if base is not None else total),
        **_pax_prices(total, search),
    }
    booking_data = {
        "offer_id": offer_id,
        "passenger_ids": [p.get("id") for p in passengers if isinstance(p, dict)],
        "total_amount": offer.get("total_amount"),
        "total_currency": currency,
    }
    refundable = _refundable(offer)

    entries = []
    for slot, slice_ in enumerate(slices):
        if not isinstance(slice_, dict) or not isinstance(slice_.get("segments"), list):
            raise MappingError("Slice has no segments.")
        legs = []
        for segment in slice_["segments"]:
            origin = _place(segment, "origin")
            destination = _place(segment, "destination")
            departure_date, departure_time = split_timestamp(segment.get("departing_at"))
            arrival_date, arrival_time = split_timestamp(segment.get("arriving_at"))
            carrier = _carrier(segment)

            legs.append(
                make_segment(
                    airline=carrier.get("name") or "",
                    airline_code=carrier.get("iata_code") or "",
                    flight_no=str(segment.get("marketing_carrier_flight_number") or ""),
                    cabin_class=_cabin_class(segment, search.class_type),
                    baggage=_baggage(segment, "checked"),
                    cabin_baggage=_baggage(segment, "carry_on"),
                    departure_airport=origin.get("name") or "",
                    departure_code=origin["iata_code"],
                    arrival_airport=destination.get("name") or "",
                    arrival_code=destination["iata_code"],
                    departure_date=departure_date,
                    departure_time=departure_time,
                    arrival_date=arrival_date,
                    arrival_time=arrival_time,
                    duration=format_iso_duration(segment.get("duration")),
                    booking_data=booking_data,
                    supplier=SUPPLIER,
                    type=search.effective_trip_type,
                    refundable=refundable,
                    **prices,
                )
            )
        if not legs:
            raise MappingError("Slice has no segments.")
        entries.append((offer_id, slot, legs))
    return entries


class DuffelAdapter(FlightAdapter):
    name = SUPPLIER
    requires_credential = True

    def endpoint(self, config):
        return config.duffel_url

    def build_headers(self, search, config):
        headers = super().build_headers(search, config)
        headers["Duffel-Version"] = config.duffel_version
        headers["Authorization"] = f"Bearer {search.api_key}"
        return headers

    def map_request(self, search):
        return {
            "data": {
                "slices": build_slices(search),
                "passengers": build_passengers(search),
                "cabin_class": search.class_type,
            }
        }

    def normalize_response(self, payload, search):
        data = payload.get("data") if isinstance(payload, dict) else None
        offers = data.get("offers") if isinstance(data, dict) else None
        if not isinstance(offers, list):
            logger.info("Duffel response has no offers collection.")
            return []

        entries = []
        seen_ids = set()
        for offer in offers:
            try:
                offer_entries = _offer_entries(offer, search)
                if offer["id"] in seen_ids:
                    continue
                seen_ids.add(offer["id"])
                entries.extend(offer_entries)
            except (MappingError, KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.debug("Skipping Duffel offer: %s", exc)
                continue

        return group_by_slot(entries, round_trip=search.is_round_trip)
