"""Nexus proof of concept.

Demonstrates cross-namespace workflow invocation ("Nexus operations") on
Temporal:
- configuration loaded from `.env` and CLI flags
- structured logging
- namespace and Nexus endpoint bootstrap
- a caller workflow invoking start/query/signal/mapped operations in a handler namespace

Workflow modules under this package are re-imported by the workflow sandbox,
so the package root stays free of imports.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
