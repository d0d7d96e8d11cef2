"""TLS material loading for cloud connections.

Certificates are read from a single directory. File names are fixed:

- admin (internode) identity: `internode.crt`, `internode.key`, CA `internode-ca.crt`
- namespace (caller/handler) identity: `nexus-client.pem`, `nexus-client.key`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from temporalio.service import TLSConfig

logger = logging.getLogger(__name__)

INTERNODE_CERT = "internode.crt"
INTERNODE_KEY = "internode.key"
INTERNODE_CA = "internode-ca.crt"
NEXUS_CLIENT_CERT = "nexus-client.pem"
NEXUS_CLIENT_KEY = "nexus-client.key"

_PEM_CERTIFICATE_MARKER = b"-----BEGIN CERTIFICATE-----"
_PEM_KEY_MARKER = b"PRIVATE KEY-----"


class CertificateError(ValueError):
    """Raised when TLS material is missing or unusable."""


@dataclass(frozen=True, slots=True)
class KeyPair:
    cert: bytes
    key: bytes


def _read(path: Path, *, what: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise CertificateError(f"failed reading {what}: {path}") from e


def load_key_pair(cert_path: Path, key_path: Path) -> KeyPair:
    """Load a PEM client certificate and its private key."""

    cert = _read(cert_path, what="client certificate")
    key = _read(key_path, what="client key")
    if _PEM_CERTIFICATE_MARKER not in cert:
        raise CertificateError(f"client certificate is not PEM encoded: {cert_path}")
    if _PEM_KEY_MARKER not in key:
        raise CertificateError(f"client key is not PEM encoded: {key_path}")
    return KeyPair(cert=cert, key=key)


def load_ca_bundle(path: Path) -> bytes:
    """Load a server root CA bundle, requiring at least one PEM certificate."""

    data = _read(path, what="server CA")
    if _PEM_CERTIFICATE_MARKER not in data:
        raise CertificateError("server CA PEM file invalid")
    return data


def internode_tls_config(certs_dir: Path, *, server_name: str) -> TLSConfig:
    """mTLS config for the admin client talking to the cluster frontend."""

    pair = load_key_pair(certs_dir / INTERNODE_CERT, certs_dir / INTERNODE_KEY)
    ca = load_ca_bundle(certs_dir / INTERNODE_CA)
    logger.debug("Loaded internode TLS material", extra={"certs_dir": str(certs_dir)})
    return TLSConfig(
        server_root_ca_cert=ca,
        domain=server_name,
        client_cert=pair.cert,
        client_private_key=pair.key,
    )


def namespace_tls_config(certs_dir: Path, *, server_name: str) -> TLSConfig:
    """mTLS config for a namespace client; the server chain is verified with system roots."""

    pair = load_key_pair(certs_dir / NEXUS_CLIENT_CERT, certs_dir / NEXUS_CLIENT_KEY)
    return TLSConfig(
        domain=server_name,
        client_cert=pair.cert,
        client_private_key=pair.key,
    )
