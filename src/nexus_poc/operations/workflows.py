"""Workflow definitions for both sides of the Nexus call.

`MyHandlerWorkflow` and `MappedProvisionWorkflow` run in the handler
namespace; `MyCallerWorkflow` runs in the caller namespace and reaches the
handler only through the Nexus endpoint.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import timedelta
from typing import Any

from temporalio import workflow
from temporalio.exceptions import ChildWorkflowError

with workflow.unsafe.imports_passed_through():
    from nexus_poc.operations.mapping import map_provision_result
    from nexus_poc.operations.models import (
        STATUS_PROVISIONING,
        STATUS_READY,
        MyCallerInput,
        MyInput,
        MyIntermediateOutput,
        MyMappedOutput,
        MyOutput,
    )
    from nexus_poc.operations.service import (
        GET_CELL_STATUS,
        SERVICE_NAME,
        SET_CELL_STATUS,
        ProvisioningService,
    )
    from nexus_poc.operations.tenancy import source_namespace_headers

# A cell that is never signaled becomes ready on its own after this window.
PROVISIONING_WINDOW = timedelta(seconds=10)
OPERATION_TIMEOUT = timedelta(minutes=5)


@workflow.defn
class MyHandlerWorkflow:
    @workflow.init
    def __init__(self, input: MyInput) -> None:
        self._state = MyOutput(
            cell_id=input.cell_id,
            stuff=input.stuff,
            status=STATUS_PROVISIONING,
        )

    @workflow.run
    async def run(self, input: MyInput) -> MyOutput:
        try:
            await workflow.wait_condition(
                lambda: self._state.status == STATUS_READY,
                timeout=PROVISIONING_WINDOW,
            )
        except asyncio.TimeoutError:
            workflow.logger.info("Provisioning window elapsed for cell %s", input.cell_id)
            self._state = replace(self._state, status=STATUS_READY)
        return self._state

    @workflow.query(name=GET_CELL_STATUS)
    def get_status(self) -> MyOutput:
        return self._state

    @workflow.signal(name=SET_CELL_STATUS)
    def set_status(self, input: MyInput) -> None:
        self._state = replace(self._state, stuff=input.stuff, status=STATUS_READY)


@workflow.defn
class MappedProvisionWorkflow:
    """Provision a cell and hand back the mapped result."""

    @workflow.run
    async def run(self, input: MyInput) -> MyMappedOutput:
        try:
            output = await workflow.execute_child_workflow(
                MyHandlerWorkflow.run,
                input,
                id=f"{workflow.info().workflow_id}-source",
            )
        except ChildWorkflowError as e:
            intermediate = MyIntermediateOutput(failure=str(e.cause or e))
        else:
            intermediate = MyIntermediateOutput(output=output)
        return map_provision_result(intermediate)


@workflow.defn
class MyCallerWorkflow:
    """Exercise every handler operation once, then wait for the provisioned cell."""

    @workflow.run
    async def run(self, input: MyCallerInput) -> MyOutput:
        headers = source_namespace_headers(workflow.info().namespace)
        op_input = input.to_operation_input()

        nexus_client = workflow.create_nexus_client(
            endpoint=input.endpoint,
            service=ProvisioningService,
        )

        # Returns once the handler has started the backing workflow.
        provision = await nexus_client.start_operation(
            ProvisioningService.provision_cell,
            op_input,
            headers=headers,
            schedule_to_close_timeout=OPERATION_TIMEOUT,
        )
        workflow.logger.info("provision-cell started (token %s)", provision.operation_token)

        mapped = await nexus_client.start_operation(
            ProvisioningService.provision_cell_mapped,
            op_input,
            headers=headers,
            schedule_to_close_timeout=OPERATION_TIMEOUT,
        )

        status = await nexus_client.execute_operation(
            ProvisioningService.get_cell_status,
            op_input,
            headers=headers,
            schedule_to_close_timeout=OPERATION_TIMEOUT,
        )
        workflow.logger.info("Cell %s status: %s", status.cell_id, status.status)

        # Same operation, addressed by service and operation name only.
        untyped_client: workflow.NexusClient[Any] = workflow.create_nexus_client(
            endpoint=input.endpoint,
            service=SERVICE_NAME,
        )
        named_status = await untyped_client.execute_operation(
            GET_CELL_STATUS,
            op_input,
            output_type=MyOutput,
            headers=headers,
            schedule_to_close_timeout=OPERATION_TIMEOUT,
        )
        workflow.logger.info("Cell %s status by name: %s", named_status.cell_id, named_status.status)

        await nexus_client.execute_operation(
            ProvisioningService.set_cell_status,
            op_input,
            headers=headers,
            schedule_to_close_timeout=OPERATION_TIMEOUT,
        )

        mapped_output = await mapped
        workflow.logger.info("Mapped cell %s ready=%s", mapped_output.cell_id, mapped_output.ready)
        return await provision
