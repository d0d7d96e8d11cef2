"""Configuration for the Nexus proof of concept.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Per-run choices (cloud vs local, namespaces, certs directory) come from CLI
flags and are resolved into `PocOptions`, with settings supplying defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class PocSettings(BaseSettings):
    """Settings for the proof of concept.

    Environment variables:
    - TEMPORAL_HOST_PORT         (optional)
    - TEMPORAL_CLOUD_DOMAIN      (optional)
    - NEXUS_POC_CERTS_DIR        (optional)
    - NEXUS_POC_CALLER_NAMESPACE (optional)
    - NEXUS_POC_HANDLER_NAMESPACE (optional)
    - LOG_LEVEL                  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `PocSettings(_env_file=path_to_env)`.
    """

    host_port: str = Field(
        default="localhost:7233",
        validation_alias="TEMPORAL_HOST_PORT",
        description="Frontend address used for local clients and the admin client",
    )
    cloud_domain: str = Field(
        default="tmprl-test.cloud",
        validation_alias="TEMPORAL_CLOUD_DOMAIN",
        description="Domain suffix for cloud namespace endpoints (<namespace>.<domain>:7233)",
    )
    internode_server_name: str = Field(
        default="frontend.temporal.svc.cluster.local",
        validation_alias="TEMPORAL_INTERNODE_SERVER_NAME",
        description="TLS server name presented by the frontend to the cloud admin client",
    )

    certs_dir: Path = Field(
        default=Path("cloud-certs"),
        validation_alias="NEXUS_POC_CERTS_DIR",
        description="Directory containing cloud TLS certificates and keys",
    )
    caller_namespace: str = Field(
        default="nexus-poc-caller.temporal-dev",
        validation_alias="NEXUS_POC_CALLER_NAMESPACE",
        description="Caller namespace (in cloud this should include the account ID)",
    )
    handler_namespace: str = Field(
        default="nexus-poc-handler.temporal-dev",
        validation_alias="NEXUS_POC_HANDLER_NAMESPACE",
        description="Handler namespace (in cloud this should include the account ID)",
    )

    caller_task_queue: str = Field(
        default="my-caller-queue",
        validation_alias="NEXUS_POC_CALLER_TASK_QUEUE",
        description="Task queue polled by the caller worker",
    )
    handler_task_queue: str = Field(
        default="my-handler-queue",
        validation_alias="NEXUS_POC_HANDLER_TASK_QUEUE",
        description="Task queue polled by the handler worker and targeted by the endpoint",
    )
    endpoint_name: str = Field(
        default="nexus-poc-provisioning",
        validation_alias="NEXUS_POC_ENDPOINT",
        description="Name of the Nexus endpoint routing caller operations to the handler",
    )

    namespace_retention_hours: int = Field(
        default=24,
        gt=0,
        validation_alias="NEXUS_POC_NAMESPACE_RETENTION_HOURS",
        description="Workflow execution retention for namespaces registered locally",
    )

    log_level: LogLevel = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level (case-insensitive)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def namespace_retention(self) -> timedelta:
        """Retention applied when registering namespaces."""

        return timedelta(hours=self.namespace_retention_hours)


@dataclass(frozen=True, slots=True)
class PocOptions:
    """Options resolved for a single run."""

    cloud: bool
    certs_dir: Path
    skip_env_setup: bool
    caller_namespace: str
    handler_namespace: str

    @classmethod
    def from_settings(
        cls,
        settings: PocSettings,
        *,
        cloud: bool = False,
        certs_dir: Path | None = None,
        skip_env_setup: bool = False,
        caller_namespace: str | None = None,
        handler_namespace: str | None = None,
    ) -> PocOptions:
        return cls(
            cloud=cloud,
            certs_dir=certs_dir if certs_dir is not None else settings.certs_dir,
            skip_env_setup=skip_env_setup,
            caller_namespace=caller_namespace or settings.caller_namespace,
            handler_namespace=handler_namespace or settings.handler_namespace,
        )
