"""Pyenv installation, activation and environment diffing."""
from mcp_pyenv.pyenv.differ import (
    apply_delta,
    compute_delta,
    diff_snapshots,
    get_pyenv_env_vars,
)
from mcp_pyenv.pyenv.exports import parse_export
from mcp_pyenv.pyenv.installer import install_pyenv

__all__ = [
    "apply_delta",
    "compute_delta",
    "diff_snapshots",
    "get_pyenv_env_vars",
    "install_pyenv",
    "parse_export",
]
