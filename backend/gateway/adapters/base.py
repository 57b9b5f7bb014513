JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class FlightAdapter:
    name = ""
    requires_credential = False

    def endpoint(self, config):
        raise NotImplementedError

    def build_headers(self, search, config):
        return dict(JSON_HEADERS)

    def map_request(self, search):
        """
        Returns the supplier request payload for a legacy search.
        """
        raise NotImplementedError

    def normalize_response(self, payload, search):
        """
        Returns a list of canonical itineraries.
        """
        raise NotImplementedError
