"""Worker wiring for the caller and handler namespaces."""

from __future__ import annotations

import asyncio
import logging
import uuid

from temporalio.client import Client
from temporalio.worker import Worker

from nexus_poc.admin.env_setup import setup_env
from nexus_poc.config import PocOptions, PocSettings
from nexus_poc.connection.clients import NamespaceClients, create_namespace_clients
from nexus_poc.operations.handlers import ProvisioningServiceHandler
from nexus_poc.operations.models import MyCallerInput, MyOutput
from nexus_poc.operations.workflows import (
    MappedProvisionWorkflow,
    MyCallerWorkflow,
    MyHandlerWorkflow,
)

logger = logging.getLogger(__name__)


def build_handler_worker(client: Client, settings: PocSettings) -> Worker:
    return Worker(
        client,
        task_queue=settings.handler_task_queue,
        workflows=[MyHandlerWorkflow, MappedProvisionWorkflow],
        nexus_service_handlers=[ProvisioningServiceHandler()],
    )


def build_caller_worker(client: Client, settings: PocSettings) -> Worker:
    return Worker(
        client,
        task_queue=settings.caller_task_queue,
        workflows=[MyCallerWorkflow],
    )


async def execute_caller(
    client: Client,
    settings: PocSettings,
    *,
    cell_id: str,
    stuff: int,
    workflow_id: str | None = None,
) -> MyOutput:
    """Run the caller workflow once and return the provisioned cell."""

    workflow_id = workflow_id or f"nexus-poc-caller-{uuid.uuid4()}"
    logger.info(
        "Executing caller workflow",
        extra={"workflow_id": workflow_id, "cell_id": cell_id, "endpoint": settings.endpoint_name},
    )
    return await client.execute_workflow(
        MyCallerWorkflow.run,
        MyCallerInput(endpoint=settings.endpoint_name, cell_id=cell_id, stuff=stuff),
        id=workflow_id,
        task_queue=settings.caller_task_queue,
    )


async def run_workers(clients: NamespaceClients, settings: PocSettings) -> None:
    """Serve both namespaces until cancelled."""

    async with (
        build_handler_worker(clients.handler, settings),
        build_caller_worker(clients.caller, settings),
    ):
        logger.info(
            "Workers running",
            extra={
                "handler_task_queue": settings.handler_task_queue,
                "caller_task_queue": settings.caller_task_queue,
            },
        )
        await asyncio.Event().wait()


async def run_demo(
    settings: PocSettings, options: PocOptions, *, cell_id: str, stuff: int
) -> MyOutput:
    """Bootstrap (unless skipped), start both workers and run the caller once."""

    if options.skip_env_setup:
        logger.info("Skipping environment setup")
    else:
        await setup_env(settings, options)

    clients = await create_namespace_clients(settings, options)
    async with (
        build_handler_worker(clients.handler, settings),
        build_caller_worker(clients.caller, settings),
    ):
        return await execute_caller(clients.caller, settings, cell_id=cell_id, stuff=stuff)
