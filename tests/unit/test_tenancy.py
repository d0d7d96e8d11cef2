"""Unit tests for tenant resolution and tenant-scoped workflow ids."""

from __future__ import annotations

import hashlib

import nexusrpc
import pytest

from nexus_poc.operations.tenancy import (
    SOURCE_NAMESPACE_HEADER,
    construct_id,
    hash_source,
    source_namespace_headers,
    tenant_id_from_headers,
)


def test_hash_source_is_truncated_sha1_hex() -> None:
    tenant = hash_source("nexus-poc-caller.temporal-dev")

    assert len(tenant) == 16
    assert tenant == hashlib.sha1(b"nexus-poc-caller.temporal-dev").hexdigest()[:16]


def test_tenant_from_headers_matches_case_insensitively() -> None:
    expected = hash_source("caller-ns")

    assert tenant_id_from_headers(source_namespace_headers("caller-ns")) == expected
    assert tenant_id_from_headers({"Temporal-Source-Namespace": "caller-ns"}) == expected


def test_different_namespaces_get_different_tenants() -> None:
    assert tenant_id_from_headers({SOURCE_NAMESPACE_HEADER: "a"}) != tenant_id_from_headers(
        {SOURCE_NAMESPACE_HEADER: "b"}
    )


@pytest.mark.parametrize("headers", [{}, {SOURCE_NAMESPACE_HEADER: "  "}, {"other": "x"}])
def test_missing_source_namespace_is_unauthorized(headers: dict[str, str]) -> None:
    with pytest.raises(nexusrpc.HandlerError) as ei:
        tenant_id_from_headers(headers)

    assert ei.value.type == nexusrpc.HandlerErrorType.UNAUTHORIZED


def test_construct_id() -> None:
    assert construct_id("provision-cell", "abc123", "cell-1") == "provision-cell-abc123-cell-1"
    assert construct_id("provision-cell", "abc123", "a", "b") == "provision-cell-abc123-a-b"
    assert construct_id("provision-cell", "abc123") == "provision-cell-abc123-"
