"""Tenant scoping for handler-side workflow ids.

The tenant is derived from the caller's source namespace, so two caller
namespaces provisioning the same cell id land on different workflows and
cannot reach each other's workflows through the query/signal operations.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping

import nexusrpc

SOURCE_NAMESPACE_HEADER = "temporal-source-namespace"


def hash_source(source: str) -> str:
    """Stable tenant id: first 8 bytes of the SHA-1 of the source, hex encoded."""

    return hashlib.sha1(source.encode("utf-8")).digest()[:8].hex()


def source_namespace_headers(namespace: str) -> dict[str, str]:
    return {SOURCE_NAMESPACE_HEADER: namespace}


def tenant_id_from_headers(headers: Mapping[str, str]) -> str:
    """Resolve the tenant id from Nexus request headers.

    Header names are matched case-insensitively. A request without a source
    namespace is rejected as unauthorized.
    """

    source = ""
    for key, value in headers.items():
        if key.lower() == SOURCE_NAMESPACE_HEADER:
            source = value.strip()
            break
    if not source:
        raise nexusrpc.HandlerError(
            "unauthorized access",
            type=nexusrpc.HandlerErrorType.UNAUTHORIZED,
        )
    return hash_source(source)


def construct_id(operation: str, tenant_id: str, *parts: str) -> str:
    return f"{operation}-{tenant_id}-{'-'.join(parts)}"

