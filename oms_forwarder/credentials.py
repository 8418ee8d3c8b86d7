"""Client certificate / private key store with one-time lazy loading."""

from __future__ import annotations

import ssl
import threading
from dataclasses import dataclass
from pathlib import Path

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import CredentialError
from .models import CredentialState
from .tls import build_client_ssl_context

logger = structlog.get_logger()


@dataclass(frozen=True)
class Credential:
    """A parsed client identity plus the TLS context built from it."""

    certificate: x509.Certificate
    private_key: rsa.RSAPrivateKey
    ssl_context: ssl.SSLContext


def _read_pem(path: str) -> bytes:
    return Path(path).read_bytes()


class CredentialStore:
    """Loads the client certificate and key once per process.

    ``ensure_loaded()`` is safe to call from several threads: the first
    successful load happens under a lock and is permanent afterwards.
    Failed loads leave the store unverified so a later call can retry
    once the files are fixed.
    """

    def __init__(
        self,
        cert_path: str,
        key_path: str,
        *,
        verify_server_certificate: bool = False,
    ) -> None:
        self._cert_path = cert_path
        self._key_path = key_path
        self._verify_server_certificate = verify_server_certificate
        self._lock = threading.Lock()
        self._credential: Credential | None = None
        self._state = CredentialState.UNINITIALIZED

    @property
    def state(self) -> CredentialState:
        return self._state

    @property
    def verified(self) -> bool:
        return self._state is CredentialState.VERIFIED

    @property
    def credential(self) -> Credential | None:
        return self._credential

    @property
    def ssl_context(self) -> ssl.SSLContext:
        if self._credential is None:
            raise CredentialError("credentials not loaded")
        return self._credential.ssl_context

    def ensure_loaded(self) -> bool:
        """Load credentials if needed.  Returns True once they are usable."""
        if self._state is CredentialState.VERIFIED:
            return True

        with self._lock:
            if self._state is CredentialState.VERIFIED:
                return True
            self._state = CredentialState.PENDING
            try:
                credential = self._load()
            except CredentialError as exc:
                logger.error(
                    "credential_load_failed",
                    cert_path=self._cert_path,
                    key_path=self._key_path,
                    error=str(exc),
                )
                return False

            self._credential = credential
            self._state = CredentialState.VERIFIED

        logger.debug(
            "credential_loaded",
            subject=credential.certificate.subject.rfc4514_string(),
            not_after=credential.certificate.not_valid_after_utc.isoformat(),
        )
        return True

    def _load(self) -> Credential:
        try:
            cert_pem = _read_pem(self._cert_path)
            key_pem = _read_pem(self._key_path)
        except OSError as exc:
            raise CredentialError(f"cannot read credential file: {exc}") from exc

        try:
            certificate = x509.load_pem_x509_certificate(cert_pem)
        except ValueError as exc:
            raise CredentialError(f"malformed certificate {self._cert_path}: {exc}") from exc

        try:
            private_key = serialization.load_pem_private_key(key_pem, password=None)
        except (ValueError, TypeError) as exc:
            raise CredentialError(f"malformed private key {self._key_path}: {exc}") from exc
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise CredentialError(
                f"private key {self._key_path} is {type(private_key).__name__}, expected RSA"
            )

        try:
            context = build_client_ssl_context(
                self._cert_path,
                self._key_path,
                verify_server_certificate=self._verify_server_certificate,
            )
        except (ssl.SSLError, OSError) as exc:
            raise CredentialError(f"certificate and key rejected by TLS layer: {exc}") from exc

        return Credential(certificate=certificate, private_key=private_key, ssl_context=context)
