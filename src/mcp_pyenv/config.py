"""Pyenv environment configuration."""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_INSTALL_URL = (
    "https://github.com/pyenv/pyenv-installer/raw/master/bin/pyenv-installer"
)


@dataclass(frozen=True)
class PyenvConfig:
    """How pyenv is installed, located and diffed"""
    install_url: str = DEFAULT_INSTALL_URL
    # Tried in order; the first existing directory wins
    candidate_dirs: tuple[str, ...] = ("~/tools/pyenv/bin", "~/.pyenv/bin")
    shell: str = "bash"
    path_var: str = "PATH"
    managed_path_suffix: str = "PYENV"
    managed_segment_pattern: str = r"\.pyenv"
    installer_file: str = "pyenv-installer"
    before_file: str = "before.env"
    after_file: str = "pyenv.env"
    log_level: str = "INFO"

    @property
    def managed_path_key(self) -> str:
        """Synthetic key holding only the pyenv-owned PATH segments"""
        return f"{self.path_var}+{self.managed_path_suffix}"


DEFAULT_CONFIG = PyenvConfig()


def load_config(environ: Optional[Mapping[str, str]] = None) -> PyenvConfig:
    """Build a config from MCP_PYENV_* environment variables over the defaults."""
    environ = os.environ if environ is None else environ
    overrides = {}

    if url := environ.get("MCP_PYENV_INSTALL_URL"):
        overrides["install_url"] = url
    if shell := environ.get("MCP_PYENV_SHELL"):
        overrides["shell"] = shell
    if level := environ.get("MCP_PYENV_LOG_LEVEL"):
        overrides["log_level"] = level.upper()
    if dirs := environ.get("MCP_PYENV_CANDIDATE_DIRS"):
        overrides["candidate_dirs"] = tuple(d for d in dirs.split(os.pathsep) if d)

    return replace(DEFAULT_CONFIG, **overrides)
