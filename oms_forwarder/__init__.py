"""OMS mutual-TLS record forwarder.

Public API re-exported here for convenience::

    from oms_forwarder import OMSOutput, ForwarderConfig
"""

from ._version import __version__
from .config import ForwarderConfig, parse_endpoint
from .credentials import Credential, CredentialStore
from .dispatcher import Dispatcher
from .errors import (
    CredentialError,
    ForwarderError,
    ForwarderNotConfiguredError,
    RecordSerializationError,
)
from .health import create_health_app
from .interface import OutputInterface
from .logging import setup_logging
from .models import (
    CredentialState,
    DeliveryStats,
    Endpoint,
    ForwarderStatus,
    HealthStatus,
    Outcome,
    RequestDescriptor,
)
from .output import OMSOutput
from .processor import BatchProcessor
from .prober import ConnectionProber
from .request_builder import RequestBuilder, serialize_record
from .runner import StdinRunner
from .shutdown import install_signal_handlers

__all__ = [
    "BatchProcessor",
    "ConnectionProber",
    "Credential",
    "CredentialError",
    "CredentialState",
    "CredentialStore",
    "DeliveryStats",
    "Dispatcher",
    "Endpoint",
    "ForwarderConfig",
    "ForwarderError",
    "ForwarderNotConfiguredError",
    "ForwarderStatus",
    "HealthStatus",
    "OMSOutput",
    "Outcome",
    "OutputInterface",
    "RecordSerializationError",
    "RequestBuilder",
    "RequestDescriptor",
    "StdinRunner",
    "__version__",
    "create_health_app",
    "install_signal_handlers",
    "parse_endpoint",
    "serialize_record",
    "setup_logging",
]
