"""Nexus service contract shared by caller and handler.

The caller workflow only needs this module (and the payload types) to
invoke operations; the implementation lives in `handlers`.
"""

from __future__ import annotations

import nexusrpc

from nexus_poc.operations.models import MyInput, MyMappedOutput, MyOutput

SERVICE_NAME = "provisioning"

PROVISION_CELL = "provision-cell"
PROVISION_CELL_MAPPED = "provision-cell-mapped"
GET_CELL_STATUS = "get-cell-status"
SET_CELL_STATUS = "set-cell-status"


@nexusrpc.service(name=SERVICE_NAME)
class ProvisioningService:
    provision_cell: nexusrpc.Operation[MyInput, MyOutput] = nexusrpc.Operation(
        name=PROVISION_CELL
    )
    provision_cell_mapped: nexusrpc.Operation[MyInput, MyMappedOutput] = nexusrpc.Operation(
        name=PROVISION_CELL_MAPPED
    )
    get_cell_status: nexusrpc.Operation[MyInput, MyOutput] = nexusrpc.Operation(
        name=GET_CELL_STATUS
    )
    set_cell_status: nexusrpc.Operation[MyInput, None] = nexusrpc.Operation(
        name=SET_CELL_STATUS
    )
