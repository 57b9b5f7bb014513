import copy

from django.test import SimpleTestCase

from gateway.adapters import get_adapter
from gateway.adapters.duffel import DuffelAdapter
from gateway.adapters.iatalocal import IataLocalAdapter
from gateway.errors import ProviderError
from gateway.services.gateway import GatewayConfig
from gateway.tests.payloads import (
    duffel_offer,
    duffel_round_offer,
    duffel_segment,
    iata_fare,
    iata_leg,
    iata_payload,
    make_search,
)

CONFIG = GatewayConfig(
    legacy_target="http://legacy.test",
    iatalocal_url="http://iatalocal.test/v1/search",
    duffel_url="http://duffel.test/air/offer_requests",
)


class RegistryTests(SimpleTestCase):
    def test_resolves_aliases(self):
        self.assertIsInstance(get_adapter("IATA-Local"), IataLocalAdapter)
        self.assertIsInstance(get_adapter("duffel"), DuffelAdapter)

    def test_unknown_supplier(self):
        with self.assertRaises(ProviderError):
            get_adapter("sabre")


class DuffelNormalizeTests(SimpleTestCase):
    def setUp(self):
        self.adapter = DuffelAdapter()

    def test_headers_carry_bearer_token(self):
        headers = self.adapter.build_headers(make_search(api_key="tok"), CONFIG)
        self.assertEqual(headers["Authorization"], "Bearer tok")
        self.assertEqual(headers["Duffel-Version"], "v2")
        self.assertEqual(headers["Content-Type"], "application/json")
        self.assertEqual(headers["Accept"], "application/json")

    def test_one_way_offer(self):
        payload = {"data": {"offers": [duffel_offer()]}}
        itineraries = self.adapter.normalize_response(payload, make_search())

        self.assertEqual(len(itineraries), 1)
        self.assertEqual(len(itineraries[0]["segments"]), 1)
        segment = itineraries[0]["segments"][0][0]
        self.assertEqual(segment["airline"], "Pakistan International Airlines")
        self.assertEqual(segment["flight_no"], "302")
        self.assertEqual(segment["departure_code"], "LHE")
        self.assertEqual(segment["departure_date"], "2024-03-05")
        self.assertEqual(segment["departure_time"], "10:30")
        self.assertEqual(segment["arrival_time"], "12:35")
        self.assertEqual(segment["duration"], "2h 5m")
        self.assertEqual(segment["baggage"], "1 piece(s)")
        self.assertEqual(segment["cabin_baggage"], "1 piece(s)")
        self.assertEqual(segment["price"], "200.00")
        self.assertEqual(segment["actual_price"], "150.00")
        self.assertEqual(segment["adult_price"], "200.00")
        self.assertEqual(segment["child_price"], "0.00")
        self.assertEqual(segment["currency"], "GBP")
        self.assertTrue(segment["refundable"])
        self.assertEqual(segment["supplier"], "duffel")
        self.assertEqual(segment["booking_data"]["offer_id"], "off_1")

    def test_missing_baggage_renders_none(self):
        offer = duffel_offer(slices=[{"segments": [duffel_segment(baggages=[])]}])
        itineraries = self.adapter.normalize_response({"data": {"offers": [offer]}}, make_search())
        self.assertEqual(itineraries[0]["segments"][0][0]["baggage"], "None")

    def test_round_trip_offer_has_two_leg_lists(self):
        search = make_search(trip_type="round", return_date="2024-03-10")
        payload = {"data": {"offers": [duffel_round_offer(), duffel_offer("off_oneway")]}}
        itineraries = self.adapter.normalize_response(payload, search)

        self.assertEqual(len(itineraries), 1)
        outbound, inbound = itineraries[0]["segments"]
        self.assertEqual(outbound[0]["departure_code"], "LHE")
        self.assertEqual(inbound[0]["departure_code"], "KHI")
        self.assertEqual(inbound[0]["type"], "round")

    def test_malformed_offer_is_excluded(self):
        broken = duffel_offer("off_broken", slices=[{"segments": [duffel_segment(departing_at="soon")]}])
        no_price = duffel_offer("off_no_price", total=None)
        payload = {"data": {"offers": [broken, no_price, duffel_offer("off_ok"), "junk"]}}
        itineraries = self.adapter.normalize_response(payload, make_search())
        self.assertEqual(len(itineraries), 1)
        self.assertEqual(itineraries[0]["segments"][0][0]["booking_data"]["offer_id"], "off_ok")

    def test_missing_collection_returns_empty_list(self):
        for payload in ({}, {"data": {}}, {"errors": [{"message": "bad"}]}, [], None):
            with self.subTest(payload=payload):
                self.assertEqual(self.adapter.normalize_response(payload, make_search()), [])

    def test_price_split_across_passengers(self):
        search = make_search(adults=1, children=1)
        itineraries = self.adapter.normalize_response({"data": {"offers": [duffel_offer()]}}, search)
        segment = itineraries[0]["segments"][0][0]
        self.assertEqual(segment["adult_price"], "100.00")
        self.assertEqual(segment["child_price"], "100.00")
        self.assertEqual(segment["infant_price"], "0.00")

    def test_round_trip_without_return_date_searches_one_way(self):
        search = make_search(trip_type="round", return_date="")
        itineraries = self.adapter.normalize_response({"data": {"offers": [duffel_offer()]}}, search)

        self.assertEqual(len(itineraries), 1)
        self.assertEqual(len(itineraries[0]["segments"]), 1)
        self.assertEqual(itineraries[0]["segments"][0][0]["type"], "oneway")

    def test_duplicate_offer_id_keeps_first_offer(self):
        payload = {"data": {"offers": [duffel_offer("off_dup"), duffel_offer("off_dup", total="999.00")]}}
        itineraries = self.adapter.normalize_response(payload, make_search())

        self.assertEqual(len(itineraries), 1)
        self.assertEqual(len(itineraries[0]["segments"][0]), 1)
        self.assertEqual(itineraries[0]["segments"][0][0]["price"], "200.00")

    def test_normalizing_twice_is_identical(self):
        payload = {"data": {"offers": [duffel_round_offer(), duffel_round_offer("off_rt2")]}}
        snapshot = copy.deepcopy(payload)
        search = make_search(trip_type="round", return_date="2024-03-10")

        first = self.adapter.normalize_response(payload, search)
        second = self.adapter.normalize_response(payload, search)

        self.assertEqual(len(first), 2)
        self.assertEqual(first, second)
        self.assertEqual(payload, snapshot)


class IataLocalNormalizeTests(SimpleTestCase):
    def setUp(self):
        self.adapter = IataLocalAdapter()

    def test_headers_have_no_auth(self):
        headers = self.adapter.build_headers(make_search(), CONFIG)
        self.assertNotIn("Authorization", headers)
        self.assertEqual(self.adapter.endpoint(CONFIG), "http://iatalocal.test/v1/search")

    def test_one_way_emits_one_itinerary_per_outbound_record(self):
        fares = [iata_fare("FSK1", "B1"), iata_fare("FSK2", "B2"), iata_fare("FSK2", "B2")]
        itineraries = self.adapter.normalize_response(iata_payload(fares), make_search())

        self.assertEqual(len(itineraries), 3)
        self.assertTrue(all(len(i["segments"]) == 1 for i in itineraries))

    def test_segment_fields(self):
        itineraries = self.adapter.normalize_response(iata_payload([iata_fare()]), make_search())
        segment = itineraries[0]["segments"][0][0]

        self.assertEqual(segment["airline"], "Airblue")
        self.assertEqual(segment["airline_code"], "PA")
        self.assertEqual(segment["baggage"], "20KG")
        self.assertEqual(segment["cabin_baggage"], "7KG")
        self.assertEqual(segment["duration"], "02:05")
        self.assertEqual(segment["departure_date"], "2024-03-05")
        self.assertEqual(segment["arrival_time"], "12:35")
        self.assertEqual(segment["currency"], "PKR")
        self.assertEqual(segment["booking_data"]["fareSourceKey"], "FSK1")
        self.assertEqual(segment["supplier"], "iatalocal")

    def test_domestic_fee(self):
        itineraries = self.adapter.normalize_response(iata_payload([iata_fare(fare=1000)]), make_search())
        segment = itineraries[0]["segments"][0][0]
        self.assertEqual(segment["price"], "1070.00")
        self.assertEqual(segment["adult_price"], "1070.00")
        self.assertEqual(segment["child_price"], "0.00")
        self.assertEqual(segment["actual_price"], "1000.00")

    def test_international_fee(self):
        fare = iata_fare(fare=1000, legs=[iata_leg("LHE", "DXB", destination_country="AE")])
        search = make_search(children=1)
        segment = self.adapter.normalize_response(iata_payload([fare]), search)[0]["segments"][0][0]
        self.assertEqual(segment["price"], "1950.00")
        self.assertEqual(segment["child_price"], "1950.00")

    def test_round_trip_pairs_matching_keys_only(self):
        fares = [
            iata_fare("FSK1", "B1"),
            iata_fare("FSK1", "B1", inbound=True),
            iata_fare("FSK2", "B2"),
            iata_fare("FSK3", "B3", inbound=True),
            iata_fare("FSK4", "B4"),
            iata_fare("FSK4", "B5", inbound=True),
        ]
        search = make_search(trip_type="round", return_date="2024-03-10")
        itineraries = self.adapter.normalize_response(iata_payload(fares), search)

        self.assertEqual(len(itineraries), 1)
        outbound, inbound = itineraries[0]["segments"]
        self.assertEqual(outbound[0]["departure_code"], "LHE")
        self.assertEqual(inbound[0]["departure_code"], "KHI")

    def test_malformed_record_is_excluded(self):
        fares = [
            iata_fare("FSK1", "B1", legs=[]),
            iata_fare("FSK2", "B2", legs=[iata_leg(departure="2024-03-05")]),
            iata_fare("FSK3", "B3", fare="n/a"),
            iata_fare("FSK4", "B4"),
        ]
        itineraries = self.adapter.normalize_response(iata_payload(fares), make_search())
        self.assertEqual(len(itineraries), 1)
        self.assertEqual(itineraries[0]["segments"][0][0]["booking_data"]["fareSourceKey"], "FSK4")

    def test_missing_success_marker_returns_empty_list(self):
        fares = [iata_fare()]
        for payload in ({"status": False, "data": {"fares": fares}}, {"status": True}, {"status": True, "data": []}):
            with self.subTest(payload=payload):
                self.assertEqual(self.adapter.normalize_response(payload, make_search()), [])

    def test_normalizing_twice_is_identical(self):
        payload = iata_payload([iata_fare("FSK1", "B1"), iata_fare("FSK1", "B1", inbound=True)])
        snapshot = copy.deepcopy(payload)
        search = make_search(trip_type="round", return_date="2024-03-10")

        first = self.adapter.normalize_response(payload, search)
        second = self.adapter.normalize_response(payload, search)

        self.assertEqual(first, second)
        self.assertEqual(payload, snapshot)

    def test_round_trip_without_return_date_searches_one_way(self):
        search = make_search(trip_type="round", return_date="")
        itineraries = self.adapter.normalize_response(iata_payload([iata_fare()]), search)

        self.assertEqual(len(itineraries), 1)
        self.assertEqual(len(itineraries[0]["segments"]), 1)
        self.assertEqual(itineraries[0]["segments"][0][0]["type"], "oneway")
