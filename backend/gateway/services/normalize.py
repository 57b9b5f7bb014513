import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from gateway.errors import MappingError

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")
BAGGAGE_LABEL_RE = re.compile(r"^\s*Baggage:", re.IGNORECASE)

NO_BAGGAGE = "None"

SEGMENT_DEFAULTS = {
    "airline": "",
    "airline_code": "",
    "flight_no": "",
    "cabin_class": "",
    "baggage": NO_BAGGAGE,
    "cabin_baggage": NO_BAGGAGE,
    "departure_airport": "",
    "departure_code": "",
    "arrival_airport": "",
    "arrival_code": "",
    "departure_date": "",
    "departure_time": "",
    "arrival_date": "",
    "arrival_time": "",
    "duration": "",
    "booking_data": None,
    "supplier": "",
    "type": "oneway",
    "refundable": False,
    "currency": "",
    "price": "0.00",
    "actual_price": "0.00",
    "adult_price": "0.00",
    "child_price": "0.00",
    "infant_price": "0.00",
}


def split_timestamp(value) -> tuple[str, str]:
    """
    "2024-03-05T10:30:00" -> ("2024-03-05", "10:30").

    Offsets are fixed; a timestamp that does not produce a full date and
    HH:MM time cannot be rendered and fails the record.
    """
    if not isinstance(value, str):
        raise MappingError(f"Timestamp is not a string: {value!r}")
    date, time = value[0:10], value[11:16]
    if not DATE_RE.match(date) or not TIME_RE.match(time):
        raise MappingError(f"Unrecognised timestamp: {value!r}")
    return date, time


def format_iso_duration(value) -> str:
    """PT2H5M -> 2h 5m"""
    if not value or not isinstance(value, str):
        return ""
    text = value.strip()
    if text.upper().startswith("PT"):
        text = text[2:]
    return text.replace("H", "h ").replace("M", "m").lower().strip()


def format_minutes(value) -> str:
    """Total minutes as zero-padded HH:MM; unusable input gives 00:00."""
    try:
        total = float(value)
    except (TypeError, ValueError):
        return "00:00"
    if math.isnan(total) or math.isinf(total) or total < 0:
        return "00:00"
    total = int(total)
    return f"{total // 60:02d}:{total % 60:02d}"


def strip_baggage_label(value) -> str:
    if not value or not isinstance(value, str):
        return NO_BAGGAGE
    text = BAGGAGE_LABEL_RE.sub("", value, count=1).strip()
    return text or NO_BAGGAGE


def to_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise MappingError(f"Invalid amount: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise MappingError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise MappingError(f"Invalid amount: {value!r}")
    return amount


def apply_fare_rule(price, domestic: bool) -> int:
    """
    Sale price for a raw supplier fare.

    Domestic: price * 0.97 + 100.
    International: price * 0.95 + max(1000, price * 0.02).
    """
    amount = to_decimal(price)
    if domestic:
        sale = amount * Decimal("0.97") + Decimal("100")
    else:
        sale = amount * Decimal("0.95") + max(Decimal("1000"), amount * Decimal("0.02"))
    return int(sale.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def money(value, places="0.01") -> str:
    return str(to_decimal(value).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def make_segment(**fields) -> dict:
    unknown = set(fields) - set(SEGMENT_DEFAULTS)
    if unknown:
        raise ValueError(f"Unknown segment fields: {sorted(unknown)}")
    segment = dict(SEGMENT_DEFAULTS)
    segment.update(fields)
    return segment
