"""Client dialing and TLS material for local and cloud deployments."""

from nexus_poc.connection.clients import (
    NamespaceClients,
    create_admin_client,
    create_namespace_clients,
)
from nexus_poc.connection.tls import CertificateError

__all__ = [
    "CertificateError",
    "NamespaceClients",
    "create_admin_client",
    "create_namespace_clients",
]
