"""Environment bootstrap: namespaces and the Nexus service route.

Local runs register both namespaces (ignoring "already exists"). In cloud,
namespaces are created out of band and only the route is registered.

The route is a Nexus endpoint named after the service that targets the
handler namespace and task queue. Registration is create-or-update and is
read back afterwards so a silently ignored update fails loudly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from google.protobuf.duration_pb2 import Duration
from temporalio.api.nexus.v1 import Endpoint, EndpointSpec, EndpointTarget
from temporalio.api.operatorservice.v1 import (
    CreateNexusEndpointRequest,
    GetNexusEndpointRequest,
    ListNexusEndpointsRequest,
    UpdateNexusEndpointRequest,
)
from temporalio.api.workflowservice.v1 import (
    DescribeNamespaceRequest,
    RegisterNamespaceRequest,
)
from temporalio.client import Client
from temporalio.service import RPCError, RPCStatusCode

from nexus_poc.config import PocOptions, PocSettings
from nexus_poc.connection.clients import create_admin_client

logger = logging.getLogger(__name__)


class EnvironmentSetupError(RuntimeError):
    """Raised when namespace or service registration fails."""


@dataclass(frozen=True, slots=True)
class EndpointRoute:
    """Where the endpoint sends operations."""

    name: str
    namespace: str
    task_queue: str

    def to_spec(self) -> EndpointSpec:
        return EndpointSpec(
            name=self.name,
            target=EndpointTarget(
                worker=EndpointTarget.Worker(
                    namespace=self.namespace,
                    task_queue=self.task_queue,
                )
            ),
        )

    def matches(self, endpoint: Endpoint) -> bool:
        worker = endpoint.spec.target.worker
        return (
            endpoint.spec.name == self.name
            and worker.namespace == self.namespace
            and worker.task_queue == self.task_queue
        )


class EnvironmentSetup:
    """Administrative RPCs against the frontend, through an admin client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def register_namespace(self, namespace: str, *, retention: timedelta) -> bool:
        """Register a namespace. Returns False when it already exists."""

        period = Duration()
        period.FromTimedelta(retention)
        try:
            await self._client.workflow_service.register_namespace(
                RegisterNamespaceRequest(
                    namespace=namespace,
                    workflow_execution_retention_period=period,
                )
            )
        except RPCError as e:
            if e.status == RPCStatusCode.ALREADY_EXISTS:
                logger.info("Namespace already registered", extra={"namespace": namespace})
                return False
            raise EnvironmentSetupError(f"failed registering namespace {namespace!r}") from e

        logger.info("Registered namespace", extra={"namespace": namespace})
        return True

    async def verify_namespace(self, namespace: str) -> None:
        try:
            resp = await self._client.workflow_service.describe_namespace(
                DescribeNamespaceRequest(namespace=namespace)
            )
        except RPCError as e:
            raise EnvironmentSetupError(f"namespace {namespace!r} is not available") from e
        if resp.namespace_info.name != namespace:
            raise EnvironmentSetupError(
                f"namespace lookup returned {resp.namespace_info.name!r}, expected {namespace!r}"
            )

    async def find_endpoint(self, name: str) -> Endpoint | None:
        try:
            resp = await self._client.operator_service.list_nexus_endpoints(
                ListNexusEndpointsRequest(name=name)
            )
        except RPCError as e:
            raise EnvironmentSetupError(f"failed listing Nexus endpoints named {name!r}") from e
        for endpoint in resp.endpoints:
            if endpoint.spec.name == name:
                return endpoint
        return None

    async def create_or_update_endpoint(self, route: EndpointRoute) -> Endpoint:
        existing = await self.find_endpoint(route.name)
        try:
            if existing is None:
                created = await self._client.operator_service.create_nexus_endpoint(
                    CreateNexusEndpointRequest(spec=route.to_spec())
                )
                logger.info(
                    "Created Nexus endpoint",
                    extra={"endpoint": route.name, "endpoint_id": created.endpoint.id},
                )
                return created.endpoint

            if route.matches(existing):
                logger.info(
                    "Nexus endpoint already up to date",
                    extra={"endpoint": route.name, "endpoint_id": existing.id},
                )
                return existing

            updated = await self._client.operator_service.update_nexus_endpoint(
                UpdateNexusEndpointRequest(
                    id=existing.id,
                    version=existing.version,
                    spec=route.to_spec(),
                )
            )
        except RPCError as e:
            raise EnvironmentSetupError(f"failed registering Nexus endpoint {route.name!r}") from e

        logger.info(
            "Updated Nexus endpoint",
            extra={"endpoint": route.name, "endpoint_id": updated.endpoint.id},
        )
        return updated.endpoint

    async def verify_endpoint(self, endpoint_id: str, route: EndpointRoute) -> None:
        try:
            resp = await self._client.operator_service.get_nexus_endpoint(
                GetNexusEndpointRequest(id=endpoint_id)
            )
        except RPCError as e:
            raise EnvironmentSetupError(f"failed reading Nexus endpoint {route.name!r}") from e
        if not route.matches(resp.endpoint):
            raise EnvironmentSetupError(
                f"incoming service registry not updated: {resp.endpoint.spec}"
            )

    async def run(
        self,
        *,
        route: EndpointRoute,
        caller_namespace: str,
        retention: timedelta,
        register_namespaces: bool,
    ) -> Endpoint:
        if register_namespaces:
            # Namespaces in cloud are created with internal admin tooling.
            await self.register_namespace(caller_namespace, retention=retention)
            await self.register_namespace(route.namespace, retention=retention)

        await self.verify_namespace(caller_namespace)
        await self.verify_namespace(route.namespace)

        endpoint = await self.create_or_update_endpoint(route)
        await self.verify_endpoint(endpoint.id, route)
        return endpoint


async def setup_env(settings: PocSettings, options: PocOptions) -> Endpoint:
    """Dial the admin client and bootstrap namespaces and the service route."""

    client = await create_admin_client(settings, options)
    route = EndpointRoute(
        name=settings.endpoint_name,
        namespace=options.handler_namespace,
        task_queue=settings.handler_task_queue,
    )
    return await EnvironmentSetup(client).run(
        route=route,
        caller_namespace=options.caller_namespace,
        retention=settings.namespace_retention,
        register_namespaces=not options.cloud,
    )
