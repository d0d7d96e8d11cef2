from __future__ import annotations

from temporalio.exceptions import ApplicationError

from nexus_poc.operations.models import (
    STATUS_READY,
    MyIntermediateOutput,
    MyMappedOutput,
)

PROVISION_FAILED = "ProvisionFailed"


def map_provision_result(intermediate: MyIntermediateOutput) -> MyMappedOutput:
    """Map a provision outcome to the caller-facing shape.

    A failed source becomes a non-retryable application error so the mapped
    operation completes unsuccessfully instead of being retried.
    """

    if intermediate.failure is not None:
        raise ApplicationError(
            intermediate.failure,
            type=PROVISION_FAILED,
            non_retryable=True,
        )
    if intermediate.output is None:
        raise ApplicationError(
            "provision completed without output",
            type=PROVISION_FAILED,
            non_retryable=True,
        )

    output = intermediate.output
    return MyMappedOutput(
        cell_id=output.cell_id,
        ready=output.status == STATUS_READY,
        stuff=output.stuff,
    )
