"""Turns one record into a POST request descriptor."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .errors import RecordSerializationError
from .models import Endpoint, RequestDescriptor


def serialize_record(record: Mapping[str, Any]) -> bytes:
    """Plain JSON encoding of *record*; key order is kept as supplied."""
    try:
        return json.dumps(dict(record), ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise RecordSerializationError(str(exc)) from exc


class RequestBuilder:
    def __init__(self, endpoint: Endpoint) -> None:
        self._endpoint = endpoint

    def build(self, record: Mapping[str, Any]) -> RequestDescriptor:
        """Return a fresh POST descriptor carrying *record* as the body.

        Raises :class:`RecordSerializationError` if the record holds a
        value JSON cannot represent.
        """
        return RequestDescriptor(
            method="POST",
            path=self._endpoint.path,
            body=serialize_record(record),
        )
