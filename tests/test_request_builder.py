"""Tests for oms_forwarder.request_builder."""

from __future__ import annotations

import json
from types import MappingProxyType

import pytest

from oms_forwarder.config import parse_endpoint
from oms_forwarder.errors import RecordSerializationError
from oms_forwarder.request_builder import RequestBuilder, serialize_record


@pytest.fixture
def builder() -> RequestBuilder:
    return RequestBuilder(parse_endpoint("https://oms.test:443/api/records"))


class TestBuild:
    def test_post_to_endpoint_path(self, builder: RequestBuilder):
        req = builder.build({"msg": "hello"})
        assert req.method == "POST"
        assert req.path == "/api/records"

    def test_body_parses_back_to_record(self, builder: RequestBuilder):
        req = builder.build({"msg": "hello", "count": 3})
        assert json.loads(req.body) == {"msg": "hello", "count": 3}

    def test_key_order_preserved(self, builder: RequestBuilder):
        req = builder.build({"z": 1, "a": 2, "m": 3})
        assert req.body == b'{"z":1,"a":2,"m":3}'

    def test_nested_and_unicode_values(self, builder: RequestBuilder):
        record = {"host": "web-01", "tags": ["a", "b"], "extra": {"ü": None, "n": 1.5}}
        req = builder.build(record)
        assert json.loads(req.body.decode("utf-8")) == record

    def test_accepts_read_only_mapping(self, builder: RequestBuilder):
        req = builder.build(MappingProxyType({"msg": "x"}))
        assert json.loads(req.body) == {"msg": "x"}

    def test_fresh_descriptor_per_record(self, builder: RequestBuilder):
        first = builder.build({"msg": "a"})
        second = builder.build({"msg": "a"})
        assert first is not second


class TestSerializationErrors:
    def test_non_serializable_value(self, builder: RequestBuilder):
        with pytest.raises(RecordSerializationError, match="not JSON serializable"):
            builder.build({"when": object()})

    def test_circular_reference(self):
        record: dict = {}
        record["self"] = record
        with pytest.raises(RecordSerializationError):
            serialize_record(record)
