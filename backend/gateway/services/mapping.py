MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

AIRPORT_DELIMITER = " - "

PASSENGER_TYPES = (
    ("adults", "adult"),
    ("children", "child"),
    ("infants", "infant_without_seat"),
)


def to_count(value) -> int:
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def airport_code(value) -> str:
    """Airport code from free text such as "Lahore - LHE"; plain codes pass through."""
    if value is None:
        return ""
    raw = str(value)
    if AIRPORT_DELIMITER in raw:
        raw = raw.rpartition(AIRPORT_DELIMITER)[2]
    return raw.strip().upper()


def to_dd_mon_yyyy(value) -> str:
    """2024-03-05 -> 05-Mar-2024. Anything malformed maps to ""."""
    if not value or not isinstance(value, str):
        return ""
    parts = value.strip().split("-")
    if len(parts) != 3:
        return ""
    year, month, day = parts
    try:
        month_index = int(month) - 1
    except ValueError:
        return ""
    if month_index < 0 or month_index > 11:
        return ""
    return f"{day}-{MONTHS[month_index]}-{year}"


def iso_date(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def build_slices(search, date_format=iso_date) -> list[dict]:
    origin = airport_code(search.origin)
    destination = airport_code(search.destination)

    slices = [
        {
            "origin": origin,
            "destination": destination,
            "departure_date": date_format(search.departure_date),
        }
    ]
    if search.is_round_trip:
        slices.append(
            {
                "origin": destination,
                "destination": origin,
                "departure_date": date_format(search.return_date),
            }
        )
    return slices


def build_passengers(search) -> list[dict]:
    passengers = []
    for attr, pax_type in PASSENGER_TYPES:
        passengers.extend({"type": pax_type} for _ in range(getattr(search, attr)))
    return passengers
