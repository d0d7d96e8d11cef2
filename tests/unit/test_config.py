"""Unit tests for settings loading and option resolution."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from nexus_poc.config import PocOptions, PocSettings


def test_settings_defaults(clean_env: Path) -> None:
    settings = PocSettings()

    assert settings.host_port == "localhost:7233"
    assert settings.caller_namespace == "nexus-poc-caller.temporal-dev"
    assert settings.handler_namespace == "nexus-poc-handler.temporal-dev"
    assert settings.handler_task_queue == "my-handler-queue"
    assert settings.internode_server_name == "frontend.temporal.svc.cluster.local"
    assert settings.namespace_retention == timedelta(hours=24)
    assert settings.endpoint_name == "nexus-poc-provisioning"
    assert settings.log_level == "INFO"


def test_settings_loads_from_dotenv(clean_env: Path) -> None:
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "TEMPORAL_HOST_PORT=temporal.internal:7233",
                "NEXUS_POC_HANDLER_NAMESPACE=handler.acct",
                "LOG_LEVEL=DEBUG",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = PocSettings()

    assert settings.host_port == "temporal.internal:7233"
    assert settings.handler_namespace == "handler.acct"
    assert settings.log_level == "DEBUG"


def test_settings_environment_overrides_dotenv(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (clean_env / ".env").write_text("NEXUS_POC_ENDPOINT=from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("NEXUS_POC_ENDPOINT", "from-env")

    assert PocSettings().endpoint_name == "from-env"


def test_settings_rejects_non_positive_retention(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("NEXUS_POC_NAMESPACE_RETENTION_HOURS", "0")

    with pytest.raises(ValidationError):
        PocSettings()


def test_options_fall_back_to_settings(settings: PocSettings) -> None:
    options = PocOptions.from_settings(settings)

    assert options.cloud is False
    assert options.skip_env_setup is False
    assert options.certs_dir == settings.certs_dir
    assert options.caller_namespace == settings.caller_namespace
    assert options.handler_namespace == settings.handler_namespace


def test_options_prefer_explicit_values(settings: PocSettings, tmp_path: Path) -> None:
    options = PocOptions.from_settings(
        settings,
        cloud=True,
        certs_dir=tmp_path,
        skip_env_setup=True,
        caller_namespace="caller.acct",
        handler_namespace="handler.acct",
    )

    assert options == PocOptions(
        cloud=True,
        certs_dir=tmp_path,
        skip_env_setup=True,
        caller_namespace="caller.acct",
        handler_namespace="handler.acct",
    )


def test_settings_normalizes_log_level_case(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert PocSettings().log_level == "DEBUG"


def test_settings_rejects_unknown_log_level(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        PocSettings()
