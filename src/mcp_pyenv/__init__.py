"""MCP pyenv environment package."""

from mcp_pyenv.types import (
    DeltaResult,
    EnvDelta,
    EnvSnapshot,
    VersionSpec,
    Workspace,
)
from mcp_pyenv.config import DEFAULT_CONFIG, PyenvConfig, load_config
from mcp_pyenv.pyenv.differ import apply_delta, compute_delta, diff_snapshots
from mcp_pyenv.workspaces.workspace import create_workspace, open_workspace, cleanup_workspace
from mcp_pyenv.errors import (
    PyenvEnvError,
    InstallationFailure,
    SubprocessLaunchFailure,
    IOFailure,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "DeltaResult",
    "EnvDelta",
    "EnvSnapshot",
    "VersionSpec",
    "Workspace",

    # Configuration
    "DEFAULT_CONFIG",
    "PyenvConfig",
    "load_config",

    # Delta computation
    "compute_delta",
    "diff_snapshots",
    "apply_delta",

    # Workspaces
    "create_workspace",
    "open_workspace",
    "cleanup_workspace",

    # Error types
    "PyenvEnvError",
    "InstallationFailure",
    "SubprocessLaunchFailure",
    "IOFailure",
]
