"""API route modules."""

from wsm.api.routes import health, vaults, workspaces

__all__ = ["health", "vaults", "workspaces"]
