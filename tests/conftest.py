"""Shared test fixtures for the oms_forwarder test suite."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

from oms_forwarder.config import ForwarderConfig
from oms_forwarder.credentials import CredentialStore

ENDPOINT_URL = "https://oms.test/api/records"


@dataclass(frozen=True)
class PemFiles:
    cert_path: str
    key_path: str


def _self_signed(key, common_name: str = "oms-forwarder-test") -> bytes:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM)


def _private_pem(key) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pem_dir(tmp_path_factory) -> Path:
    return tmp_path_factory.mktemp("certs")


@pytest.fixture(scope="session")
def valid_pems(pem_dir: Path, rsa_key) -> PemFiles:
    cert = pem_dir / "oms.crt"
    key = pem_dir / "oms.key"
    cert.write_bytes(_self_signed(rsa_key))
    key.write_bytes(_private_pem(rsa_key))
    return PemFiles(str(cert), str(key))


@pytest.fixture
def malformed_cert_pems(tmp_path: Path, valid_pems: PemFiles) -> PemFiles:
    cert = tmp_path / "oms.crt"
    cert.write_bytes(b"-----BEGIN CERTIFICATE-----\nnot really base64\n-----END CERTIFICATE-----\n")
    return PemFiles(str(cert), valid_pems.key_path)


@pytest.fixture
def ec_key_pems(tmp_path: Path) -> PemFiles:
    key = ec.generate_private_key(ec.SECP256R1())
    cert_path = tmp_path / "ec.crt"
    key_path = tmp_path / "ec.key"
    cert_path.write_bytes(_self_signed(key))
    key_path.write_bytes(_private_pem(key))
    return PemFiles(str(cert_path), str(key_path))


@pytest.fixture
def mismatched_pems(tmp_path: Path, valid_pems: PemFiles) -> PemFiles:
    other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    key_path = tmp_path / "other.key"
    key_path.write_bytes(_private_pem(other))
    return PemFiles(valid_pems.cert_path, str(key_path))


@pytest.fixture
def config_factory(valid_pems: PemFiles):
    """Factory to create ForwarderConfig instances with overrides."""

    def _make(**overrides) -> ForwarderConfig:
        defaults = dict(
            endpoint_url=ENDPOINT_URL,
            cert_path=valid_pems.cert_path,
            key_path=valid_pems.key_path,
            open_timeout_seconds=5.0,
            read_timeout_seconds=5.0,
        )
        defaults.update(overrides)
        return ForwarderConfig(**defaults)

    return _make


@pytest.fixture
def forwarder_config(config_factory) -> ForwarderConfig:
    return config_factory()


@pytest.fixture
def credentials(forwarder_config: ForwarderConfig) -> CredentialStore:
    return CredentialStore(forwarder_config.cert_path, forwarder_config.key_path)


@pytest.fixture
def broken_credentials(malformed_cert_pems: PemFiles) -> CredentialStore:
    return CredentialStore(malformed_cert_pems.cert_path, malformed_cert_pems.key_path)


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any setup_logging() call so capture_logs sees every event."""
    yield
    structlog.reset_defaults()
