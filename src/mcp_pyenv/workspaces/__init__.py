"""Workspace management."""
from mcp_pyenv.workspaces.workspace import (
    create_workspace,
    open_workspace,
    cleanup_workspace,
    run_workspace_command,
    read_workspace_file,
)

__all__ = [
    "create_workspace",
    "open_workspace",
    "cleanup_workspace",
    "run_workspace_command",
    "read_workspace_file",
]
