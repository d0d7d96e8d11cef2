"""Administrative bootstrap (namespaces and the Nexus endpoint)."""

from nexus_poc.admin.env_setup import (
    EndpointRoute,
    EnvironmentSetup,
    EnvironmentSetupError,
    setup_env,
)

__all__ = ["EndpointRoute", "EnvironmentSetup", "EnvironmentSetupError", "setup_env"]
