import logging

from gateway.errors import MappingError

logger = logging.getLogger(__name__)


def pair_by_direction(records, *, key, is_inbound, round_trip, build_legs):
    """
    Group one-way supplier records into itineraries.

    Records are split into outbound and inbound maps by `key(record)`.
    One-way searches yield one itinerary per outbound record. Round trips
    yield an itinerary only for keys present in both maps; an unmatched
    half is dropped rather than shown as a one-sided trip.

    `build_legs(record)` returns the canonical segment list for a record.
    Records that fail to key or build are skipped.
    """
    itineraries = []
    outbound: dict = {}
    inbound: dict = {}

    for record in records:
        try:
            if not round_trip:
                if is_inbound(record):
                    continue
                legs = build_legs(record)
                if legs:
                    itineraries.append({"segments": [legs]})
                continue

            record_key = key(record)
            target = inbound if is_inbound(record) else outbound
            if record_key in target:
                continue
            legs = build_legs(record)
            if legs:
                target[record_key] = legs
        except (MappingError, KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.debug("Skipping supplier record: %s", exc)
            continue

    for record_key, out_legs in outbound.items():
        in_legs = inbound.get(record_key)
        if in_legs:
            itineraries.append({"segments": [out_legs, in_legs]})

    return itineraries


def group_by_slot(entries, *, round_trip):
    """
    Build itineraries from `(key, slot, legs)` entries, slot 0 outbound and
    slot 1 inbound, keeping first-seen key order. The first legs seen for a
    key and slot win.

    Round-trip groups need both slots filled, one-way groups need slot 0.
    Anything else is discarded.
    """
    groups: dict = {}
    for group_key, slot, legs in entries:
        if slot not in (0, 1):
            continue
        slots = groups.setdefault(group_key, [[], []])
        if not slots[slot]:
            slots[slot] = list(legs)

    itineraries = []
    for slots in groups.values():
        if round_trip:
            if slots[0] and slots[1]:
                itineraries.append({"segments": [slots[0], slots[1]]})
        elif slots[0]:
            itineraries.append({"segments": [slots[0]]})

    return itineraries
