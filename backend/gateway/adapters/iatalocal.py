import logging

from gateway.adapters.base import FlightAdapter
from gateway.errors import MappingError
from gateway.services.mapping import airport_code, build_slices, to_dd_mon_yyyy
from gateway.services.normalize import (
    apply_fare_rule,
    format_minutes,
    make_segment,
    money,
    split_timestamp,
    strip_baggage_label,
)
from gateway.services.pairing import pair_by_direction

logger = logging.getLogger(__name__)

SUPPLIER = "iatalocal"


def _airport(leg: dict, field: str) -> dict:
    airport = leg.get(field)
    if not isinstance(airport, dict) or not airport.get("code"):
        raise MappingError(f"Leg {field} has no airport code.")
    return airport


def _country(airport: dict) -> str:
    return str(airport.get("country") or "").strip().upper()


def _is_domestic(legs: list) -> bool:
    """Same country at both ends of the record; unknown countries count as international."""
    origin = _country(_airport(legs[0], "from"))
    destination = _country(_airport(legs[-1], "to"))
    return bool(origin) and origin == destination


def _fare_key(record: dict) -> tuple:
    fare_source_key = record.get("fareSourceKey")
    booking_id = record.get("gdsBookingId")
    if not fare_source_key or booking_id in (None, ""):
        raise MappingError("Fare record has no fareSourceKey/gdsBookingId.")
    return (str(fare_source_key), str(booking_id))


def _is_inbound(record: dict) -> bool:
    return record.get("flag") is True or str(record.get("flag")).lower() == "true"


class IataLocalAdapter(FlightAdapter):
    name = SUPPLIER

    def endpoint(self, config):
        return config.iatalocal_url

    def map_request(self, search):
        return {
            "tripType": "Return" if search.is_round_trip else "OneWay",
            "journeys": [
                {"from": s["origin"], "to": s["destination"], "date": s["departure_date"]}
                for s in build_slices(search, date_format=to_dd_mon_yyyy)
            ],
            "adults": search.adults,
            "children": search.children,
            "infants": search.infants,
            "cabinClass": search.class_type,
            "currency": search.currency,
        }

    def _build_legs(self, record: dict, search) -> list[dict]:
        legs = record.get("legs")
        if not isinstance(legs, list) or not legs:
            raise MappingError("Fare record has no legs.")

        sale_price = money(apply_fare_rule(record.get("fFare"), _is_domestic(legs)))
        prices = {
            "currency": record.get("currency") or search.currency,
            "price": sale_price,
            "actual_price": money(record.get("fFare")),
            "adult_price": sale_price,
            "child_price": sale_price if search.children else "0.00",
            "infant_price": sale_price if search.infants else "0.00",
        }
        booking_data = {
            "fareSourceKey": record.get("fareSourceKey"),
            "gdsBookingId": record.get("gdsBookingId"),
            "fFare": record.get("fFare"),
            "fBFare": record.get("fBFare"),
        }

        segments = []
        for leg in legs:
            origin = _airport(leg, "from")
            destination = _airport(leg, "to")
            departure_date, departure_time = split_timestamp(leg.get("departure"))
            arrival_date, arrival_time = split_timestamp(leg.get("arrival"))
            airline = leg.get("airline") if isinstance(leg.get("airline"), dict) else {}

            segments.append(
                make_segment(
                    airline=airline.get("name") or "",
                    airline_code=airline.get("code") or "",
                    flight_no=str(leg.get("flightNo") or ""),
                    cabin_class=leg.get("cabin") or search.class_type,
                    baggage=strip_baggage_label(leg.get("baggage")),
                    cabin_baggage=strip_baggage_label(leg.get("cabinBaggage")),
                    departure_airport=origin.get("name") or "",
                    departure_code=airport_code(origin["code"]),
                    arrival_airport=destination.get("name") or "",
                    arrival_code=airport_code(destination["code"]),
                    departure_date=departure_date,
                    departure_time=departure_time,
                    arrival_date=arrival_date,
                    arrival_time=arrival_time,
                    duration=format_minutes(leg.get("duration")),
                    booking_data=booking_data,
                    supplier=SUPPLIER,
                    type=search.effective_trip_type,
                    refundable=bool(record.get("refundable")),
                    **prices,
                )
            )
        return segments

    def normalize_response(self, payload, search):
        if not isinstance(payload, dict) or not (payload.get("status") or payload.get("success")):
            logger.info("IATA Local response has no success marker.")
            return []
        data = payload.get("data")
        fares = data.get("fares") if isinstance(data, dict) else None
        if not isinstance(fares, list):
            logger.info("IATA Local response has no fares collection.")
            return []

        return pair_by_direction(
            [fare for fare in fares if isinstance(fare, dict)],
            key=_fare_key,
            is_inbound=_is_inbound,
            round_trip=search.is_round_trip,
            build_legs=lambda record: self._build_legs(record, search),
        )
