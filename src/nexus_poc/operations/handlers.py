"""Nexus operation handlers served by the handler namespace worker.

Each operation resolves the caller's tenant from the request headers and
addresses the cell's workflow by a tenant-scoped id:

- provision-cell: start `MyHandlerWorkflow` (async, completes with the workflow)
- provision-cell-mapped: start `MappedProvisionWorkflow` (async, mapped result)
- get-cell-status: query the cell workflow (sync)
- set-cell-status: signal the cell workflow (sync, no result)

Cancelling an async operation is only allowed for workflows of the
requesting tenant.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import nexusrpc
from nexusrpc import OutputT
from nexusrpc.handler import (
    CancelOperationContext,
    OperationHandler,
    StartOperationContext,
    StartOperationResultAsync,
    operation_handler,
    service_handler,
    sync_operation,
)
from temporalio import nexus
from temporalio.client import WorkflowHandle
from temporalio.nexus import WorkflowRunOperationContext
from temporalio.service import RPCError, RPCStatusCode

from nexus_poc.operations.models import MyInput, MyMappedOutput, MyOutput
from nexus_poc.operations.service import (
    GET_CELL_STATUS,
    PROVISION_CELL,
    PROVISION_CELL_MAPPED,
    SET_CELL_STATUS,
    ProvisioningService,
)
from nexus_poc.operations.tenancy import construct_id, tenant_id_from_headers
from nexus_poc.operations.workflows import MappedProvisionWorkflow, MyHandlerWorkflow

logger = logging.getLogger(__name__)


def cell_workflow_id(operation: str, headers: Mapping[str, str], cell_id: str) -> str:
    """Workflow id of a cell as seen by the tenant sending `headers`."""

    return construct_id(operation, tenant_id_from_headers(headers), cell_id)


class CellWorkflowOperation(OperationHandler[MyInput, OutputT]):
    """Async operation backed by a tenant-scoped cell workflow.

    `start` launches `workflow_run` under `<operation>-<tenant>-<cell id>` and
    completes when that workflow does. `cancel` accepts only tokens naming a
    workflow under the requesting tenant's prefix for the same operation.
    """

    def __init__(self, workflow_run: Callable[[Any, MyInput], Awaitable[OutputT]]) -> None:
        self._workflow_run = workflow_run

    async def start(self, ctx: StartOperationContext, input: MyInput) -> StartOperationResultAsync:
        workflow_id = cell_workflow_id(ctx.operation, ctx.headers, input.cell_id)
        logger.info(
            "Starting cell workflow",
            extra={"operation": ctx.operation, "workflow_id": workflow_id},
        )
        run_ctx = WorkflowRunOperationContext(
            **{f.name: getattr(ctx, f.name) for f in dataclasses.fields(ctx)}
        )
        handle = await run_ctx.start_workflow(self._workflow_run, input, id=workflow_id)
        return StartOperationResultAsync(handle.to_token())

    async def cancel(self, ctx: CancelOperationContext, token: str) -> None:
        tenant_id = tenant_id_from_headers(ctx.headers)
        try:
            workflow_id = nexus.WorkflowHandle.from_token(token).workflow_id
        except (TypeError, ValueError) as e:
            raise nexusrpc.HandlerError(
                "operation token does not name a workflow",
                type=nexusrpc.HandlerErrorType.NOT_FOUND,
            ) from e

        if not workflow_id.startswith(construct_id(ctx.operation, tenant_id)):
            logger.warning(
                "Rejected cancel of another tenant's workflow",
                extra={"operation": ctx.operation, "workflow_id": workflow_id},
            )
            raise nexusrpc.HandlerError(
                "unauthorized access",
                type=nexusrpc.HandlerErrorType.UNAUTHORIZED,
            )

        logger.info(
            "Cancelling cell workflow",
            extra={"operation": ctx.operation, "workflow_id": workflow_id},
        )
        await nexus.client().get_workflow_handle(workflow_id).cancel()


def _cell_workflow(
    ctx: StartOperationContext, input: MyInput
) -> WorkflowHandle[MyHandlerWorkflow, MyOutput]:
    # Query and signal address the workflow started by provision-cell.
    workflow_id = cell_workflow_id(PROVISION_CELL, ctx.headers, input.cell_id)
    return nexus.client().get_workflow_handle_for(MyHandlerWorkflow.run, workflow_id)


def _cell_not_found(cell_id: str, e: RPCError) -> nexusrpc.HandlerError:
    return nexusrpc.HandlerError(
        f"cell {cell_id!r} not found: {e.message}",
        type=nexusrpc.HandlerErrorType.NOT_FOUND,
    )


@service_handler(service=ProvisioningService)
class ProvisioningServiceHandler:
    @operation_handler(name=PROVISION_CELL)
    def provision_cell(self) -> OperationHandler[MyInput, MyOutput]:
        return CellWorkflowOperation(MyHandlerWorkflow.run)

    @operation_handler(name=PROVISION_CELL_MAPPED)
    def provision_cell_mapped(self) -> OperationHandler[MyInput, MyMappedOutput]:
        return CellWorkflowOperation(MappedProvisionWorkflow.run)

    @sync_operation(name=GET_CELL_STATUS)
    async def get_cell_status(self, ctx: StartOperationContext, input: MyInput) -> MyOutput:
        handle = _cell_workflow(ctx, input)
        try:
            return await handle.query(MyHandlerWorkflow.get_status)
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                raise _cell_not_found(input.cell_id, e) from e
            raise

    @sync_operation(name=SET_CELL_STATUS)
    async def set_cell_status(self, ctx: StartOperationContext, input: MyInput) -> None:
        handle = _cell_workflow(ctx, input)
        try:
            await handle.signal(MyHandlerWorkflow.set_status, input)
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                raise _cell_not_found(input.cell_id, e) from e
            raise
        logger.info(
            "Signaled cell workflow",
            extra={"operation": SET_CELL_STATUS, "workflow_id": handle.id},
        )
