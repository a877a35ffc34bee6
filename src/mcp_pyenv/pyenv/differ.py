"""Environment delta computation for pyenv activation.

The delta is computed by capturing the exported environment twice in the
workspace, once with a bare shell and once after pyenv has been initialized
and the job's virtualenv selected, and reporting what the second capture adds
or changes. Variables removed by activation are not reported.
"""

import os
import re
from typing import Mapping, Optional, Sequence

from mcp_pyenv.config import DEFAULT_CONFIG, PyenvConfig
from mcp_pyenv.errors import (
    InstallationFailure,
    PyenvEnvError,
    SubprocessLaunchFailure,
    log_error,
)
from mcp_pyenv.logging import get_logger
from mcp_pyenv.pyenv.exports import parse_export
from mcp_pyenv.pyenv.installer import install_pyenv
from mcp_pyenv.pyenv.script import render_activation_script, render_baseline_script
from mcp_pyenv.types import DeltaResult, EnvDelta, EnvSnapshot, VersionSpec, Workspace
from mcp_pyenv.workspaces.workspace import read_workspace_file, run_workspace_command

logger = get_logger(__name__)


def filter_managed_segments(path_value: str, pattern: str, sep: str = os.pathsep) -> str:
    """Keep only the search-path entries that match pattern."""
    managed = re.compile(pattern)
    return sep.join(p for p in path_value.split(sep) if managed.search(p))


def diff_snapshots(
    before: EnvSnapshot, after: EnvSnapshot, config: PyenvConfig = DEFAULT_CONFIG
) -> EnvDelta:
    """Variables added or changed between two snapshots.

    A changed search path is reported twice: verbatim under its own name and,
    under the synthetic managed key, reduced to the pyenv-owned entries.
    """
    delta: EnvDelta = {}

    for key, value in after.items():
        if before.get(key) == value:
            continue

        if key == config.path_var:
            delta[key] = value
            delta[config.managed_path_key] = filter_managed_segments(
                value, config.managed_segment_pattern
            )
        else:
            delta[key] = value

    return delta


def apply_delta(
    environ: Mapping[str, str],
    delta: EnvDelta,
    config: PyenvConfig = DEFAULT_CONFIG,
    overwrite_path: bool = True,
) -> dict[str, str]:
    """Return a copy of environ with delta applied.

    Synthetic `NAME+SUFFIX` keys are never set as variables. Without
    overwrite_path the base search path is kept and the managed entries are
    prepended to it instead.
    """
    env = dict(environ)
    managed_key = config.managed_path_key

    for key, value in delta.items():
        if "+" in key:
            continue
        if key == config.path_var and not overwrite_path:
            continue
        env[key] = value

    if not overwrite_path and delta.get(managed_key):
        current = env.get(config.path_var)
        env[config.path_var] = os.pathsep.join(
            p for p in (delta[managed_key], current) if p
        )

    return env


async def capture_environment(
    workspace: Workspace, args: Sequence[str], export_file: str
) -> EnvSnapshot:
    """Run a shell command that writes an export listing and parse the result."""
    returncode = await run_workspace_command(workspace, args)
    if returncode != 0:
        raise SubprocessLaunchFailure(
            details={"returncode": returncode, "export_file": export_file}
        )

    snapshot = parse_export(read_workspace_file(workspace, export_file))

    logger.debug(
        {"event": "environment_captured", "file": export_file, "variables": len(snapshot)}
    )

    return snapshot


async def get_pyenv_env_vars(
    workspace: Workspace,
    spec: VersionSpec,
    install_url: Optional[str] = None,
    config: PyenvConfig = DEFAULT_CONFIG,
) -> EnvDelta:
    """Install pyenv, activate spec in the workspace and return the env delta.

    Raises a PyenvEnvError subclass for the first step that fails.
    """
    install_url = install_url or config.install_url

    returncode = await install_pyenv(workspace, install_url, config)
    if returncode != 0:
        raise InstallationFailure(returncode, install_url)

    before = await capture_environment(
        workspace,
        [config.shell, "-c", render_baseline_script(config.before_file)],
        config.before_file,
    )

    after = await capture_environment(
        workspace,
        [
            config.shell,
            "-c",
            render_activation_script(spec, config.candidate_dirs, config.after_file),
        ],
        config.after_file,
    )

    delta = diff_snapshots(before, after, config)

    logger.info(
        {
            "event": "pyenv_env_computed",
            "env_name": spec.env_name,
            "changed": sorted(delta),
        }
    )

    return delta


async def compute_delta(
    workspace: Workspace,
    job_name: str,
    version: str,
    install_url: Optional[str] = None,
    config: PyenvConfig = DEFAULT_CONFIG,
) -> DeltaResult:
    """Compute the pyenv activation delta for a job, reporting failure as a result."""
    spec = VersionSpec(name=job_name, version=version)

    try:
        delta = await get_pyenv_env_vars(workspace, spec, install_url, config)
    except PyenvEnvError as e:
        log_error(e, context={"env_name": spec.env_name, "stage": e.stage}, logger=logger)
        workspace.log.write(f"ERROR: {e} (stage: {e.stage})\n")
        workspace.log.flush()
        return DeltaResult(error=e)

    return DeltaResult(delta=delta)
