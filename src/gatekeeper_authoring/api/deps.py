"""Dependency injection for FastAPI: PolicyWorkspace singleton."""

from __future__ import annotations

from gatekeeper_authoring.service.workspace import PolicyWorkspace

_workspace: PolicyWorkspace | None = None


def init_workspace(workspace: PolicyWorkspace) -> None:
    """Set the global PolicyWorkspace (called at app creation)."""
    global _workspace  # noqa: PLW0603
    _workspace = workspace


def get_workspace() -> PolicyWorkspace:
    """FastAPI ``Depends`` provider for PolicyWorkspace."""
    if _workspace is None:
        raise RuntimeError("PolicyWorkspace not initialised; call init_workspace() first")
    return _workspace


def reset_workspace() -> None:
    """Clear the global PolicyWorkspace (for tests)."""
    global _workspace  # noqa: PLW0603
    _workspace = None
