"""Temporal client construction for the admin, caller and handler roles."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from temporalio.client import Client

from nexus_poc.config import PocOptions, PocSettings
from nexus_poc.connection.tls import internode_tls_config, namespace_tls_config

logger = logging.getLogger(__name__)

# Operator and namespace-registration RPCs are not namespace scoped.
ADMIN_NAMESPACE = "default"


@dataclass(frozen=True, slots=True)
class NamespaceClients:
    caller: Client
    handler: Client


def cloud_host(namespace: str, *, domain: str) -> str:
    return f"{namespace}.{domain}"


async def create_admin_client(settings: PocSettings, options: PocOptions) -> Client:
    if options.cloud:
        tls = internode_tls_config(
            options.certs_dir, server_name=settings.internode_server_name
        )
        logger.info(
            "Dialing cloud admin client",
            extra={"host_port": settings.host_port, "server_name": settings.internode_server_name},
        )
        return await Client.connect(settings.host_port, namespace=ADMIN_NAMESPACE, tls=tls)

    logger.info("Dialing local admin client", extra={"host_port": settings.host_port})
    return await Client.connect(settings.host_port, namespace=ADMIN_NAMESPACE)


async def _connect_namespace(
    settings: PocSettings, options: PocOptions, namespace: str
) -> Client:
    if not options.cloud:
        logger.info(
            "Dialing local namespace client",
            extra={"host_port": settings.host_port, "namespace": namespace},
        )
        return await Client.connect(settings.host_port, namespace=namespace)

    host = cloud_host(namespace, domain=settings.cloud_domain)
    tls = namespace_tls_config(options.certs_dir, server_name=host)
    logger.info("Dialing cloud namespace client", extra={"host": host, "namespace": namespace})
    return await Client.connect(f"{host}:7233", namespace=namespace, tls=tls)


async def create_namespace_clients(settings: PocSettings, options: PocOptions) -> NamespaceClients:
    """Dial one client per namespace (caller first, then handler)."""

    caller = await _connect_namespace(settings, options, options.caller_namespace)
    handler = await _connect_namespace(settings, options, options.handler_namespace)
    return NamespaceClients(caller=caller, handler=handler)
