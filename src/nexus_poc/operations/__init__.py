"""Nexus service contract, handler implementations and workflows.

Kept import-light: workflow modules are re-imported inside the workflow
sandbox, so nothing here pulls in the handler side.
"""

__all__: list[str] = []
