"""Forwarder error hierarchy."""

from __future__ import annotations


class ForwarderError(RuntimeError):
    """Base error for the OMS forwarder."""


class CredentialError(ForwarderError):
    """Client certificate or private key could not be read or parsed."""


class RecordSerializationError(ForwarderError):
    """A record could not be serialized to JSON."""


class ForwarderNotConfiguredError(ForwarderError):
    """A lifecycle hook was called before ``configure``."""
