"""Payload types exchanged between the caller and handler namespaces.

These are serialized by the Temporal default data converter, so they stay
plain dataclasses with JSON-friendly fields.
"""

from __future__ import annotations

from dataclasses import dataclass

STATUS_PROVISIONING = "provisioning"
STATUS_READY = "ready"


@dataclass(frozen=True, slots=True)
class MyInput:
    cell_id: str = ""
    stuff: int = 0


@dataclass(frozen=True, slots=True)
class MyOutput:
    cell_id: str = ""
    stuff: int = 0
    status: str = STATUS_PROVISIONING


@dataclass(frozen=True, slots=True)
class MyIntermediateOutput:
    """Raw outcome of a source operation, before mapping.

    Exactly one of `output` or `failure` is set.
    """

    output: MyOutput | None = None
    failure: str | None = None


@dataclass(frozen=True, slots=True)
class MyMappedOutput:
    cell_id: str = ""
    ready: bool = False
    stuff: int = 0


@dataclass(frozen=True, slots=True)
class MyCallerInput:
    endpoint: str
    cell_id: str = ""
    stuff: int = 0

    def to_operation_input(self) -> MyInput:
        return MyInput(cell_id=self.cell_id, stuff=self.stuff)
