from pipelines.extractors import GametoolsExtractor


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def json(self):
        return self.payload


class FakeHTTP:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return FakeResponse(self.payload)

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return FakeResponse(self.payload)


def _extractor(payload):
    http = FakeHTTP(payload)
    return GametoolsExtractor(base_url="https://provider.test/bf6/", http_client=http), http


def test_single_player_request():
    extractor, http = _extractor({"kills": 1})

    assert extractor.get_player_stats("123") == {"kills": 1}
    assert http.calls == [("GET", "https://provider.test/bf6/stats/", {"params": {"playerid": "123"}})]


def test_error_envelope_is_no_data():
    extractor, _ = _extractor({"errors": ["player not found"]})
    assert extractor.get_player_stats("123") is None


def test_empty_body_is_no_data():
    extractor, _ = _extractor({})
    assert extractor.get_player_stats("123") is None


def test_batch_request_body():
    extractor, http = _extractor([{"playerId": "1"}])

    assert extractor.get_multiple_players(["1", "2"]) == [{"playerId": "1"}]
    method, url, kwargs = http.calls[0]
    assert (method, url) == ("POST", "https://provider.test/bf6/multiple/")
    assert kwargs["json"] == {"playerIds": ["1", "2"]}


def test_batch_error_envelope_is_empty():
    extractor, _ = _extractor({"errors": ["bad request"]})
    assert extractor.get_multiple_players(["1"]) == []
