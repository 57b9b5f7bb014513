from dataclasses import dataclass

from rest_framework import serializers

from gateway.services.mapping import to_count


class CountField(serializers.Field):
    """Passenger count: anything non-numeric or negative becomes 0."""

    def validate_empty_values(self, data):
        if data is None:
            return (True, 0)
        return super().validate_empty_values(data)

    def to_internal_value(self, data):
        return to_count(data)

    def to_representation(self, value):
        return value


class LegacySearchSerializer(serializers.Serializer):
    origin = serializers.CharField(required=False, allow_blank=True, default="")
    destination = serializers.CharField(required=False, allow_blank=True, default="")
    departure_date = serializers.CharField(required=False, allow_blank=True, default="")
    return_date = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    trip_type = serializers.CharField(required=False, allow_blank=True, default="oneway")
    adults = CountField(required=False, default=0)
    children = CountField(required=False, default=0)
    infants = CountField(required=False, default=0)
    currency = serializers.CharField(required=False, allow_blank=True, default="USD")
    class_type = serializers.CharField(required=False, allow_blank=True, default="economy")
    api_key = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")

    def validate(self, attrs):
        attrs["trip_type"] = "round" if (attrs.get("trip_type") or "").strip().lower() == "round" else "oneway"
        attrs["currency"] = (attrs.get("currency") or "").strip().upper() or "USD"
        attrs["class_type"] = (attrs.get("class_type") or "").strip().lower() or "economy"
        attrs["return_date"] = (attrs.get("return_date") or "").strip()
        attrs["api_key"] = (attrs.get("api_key") or "").strip()

        if attrs["adults"] + attrs["children"] + attrs["infants"] < 1:
            raise serializers.ValidationError({"adults": "At least one passenger is required."})

        return attrs


@dataclass(frozen=True)
class LegacySearch:
    origin: str
    destination: str
    departure_date: str
    return_date: str = ""
    trip_type: str = "oneway"
    adults: int = 1
    children: int = 0
    infants: int = 0
    currency: str = "USD"
    class_type: str = "economy"
    api_key: str = ""

    @classmethod
    def from_validated(cls, data):
        return cls(**{name: data[name] for name in cls.__dataclass_fields__ if name in data})

    @property
    def is_round_trip(self):
        return self.trip_type == "round" and bool(self.return_date)

    @property
    def effective_trip_type(self):
        """Trip type actually searched; a round trip without a return date runs one-way."""
        return "round" if self.is_round_trip else "oneway"

    @property
    def passenger_count(self):
        return self.adults + self.children + self.infants
