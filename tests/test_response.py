"""Tests for response normalization."""

import pytest

from estate_api.response import normalize, parse_body
from estate_api.types import Envelope, RawResponse


class TestParseBody:
    """Tests for parse_body()."""

    def test_json_object(self):
        assert parse_body(b'{"a":1}') == {"a": 1}

    def test_json_list(self):
        assert parse_body(b"[1, 2]") == [1, 2]

    def test_non_json_text(self):
        assert parse_body(b"not json") == {"raw": "not json"}

    @pytest.mark.parametrize("body", [b"", b"   \n", None])
    def test_empty_or_unreadable(self, body):
        assert parse_body(body) == {}

    def test_invalid_utf8_kept_as_raw_text(self):
        assert parse_body(b"bad \xff body") == {"raw": "bad \ufffd body"}

    def test_invalid_utf8_inside_json(self):
        assert parse_body(b'{"title": "caf\xe9"}') == {"title": "caf\ufffd"}


class TestNormalize:
    """Tests for normalize()."""

    def test_success(self):
        envelope = normalize(RawResponse(status=200, headers={}, body=b'{"a":1}'))
        assert envelope == Envelope(ok=True, status=200, data={"a": 1})

    def test_error_status_still_parsed(self):
        envelope = normalize(RawResponse(status=404, headers={}, body=b'{"error":"Not found"}'))
        assert envelope.ok is False
        assert envelope.status == 404
        assert envelope.data == {"error": "Not found"}

    @pytest.mark.parametrize("status,ok", [(199, False), (200, True), (204, True), (299, True), (300, False)])
    def test_ok_range(self, status, ok):
        assert normalize(RawResponse(status=status, headers={}, body=b"")).ok is ok

    def test_normalizing_twice_reads_same_buffer(self):
        raw = RawResponse(status=200, headers={}, body=b'{"a":1}')
        assert normalize(raw) == normalize(raw)

    def test_not_synthetic(self):
        assert normalize(RawResponse(status=500, headers={}, body=None)).synthetic is False
