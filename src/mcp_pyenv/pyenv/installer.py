"""Installer for pyenv; runs the upstream install script in the workspace"""

from mcp_pyenv.config import DEFAULT_CONFIG, PyenvConfig
from mcp_pyenv.errors import IOFailure
from mcp_pyenv.logging import get_logger
from mcp_pyenv.types import Workspace
from mcp_pyenv.utils.fetching import download_url
from mcp_pyenv.workspaces.workspace import run_workspace_command

logger = get_logger(__name__)


async def install_pyenv(
    workspace: Workspace, install_url: str, config: PyenvConfig = DEFAULT_CONFIG
) -> int:
    """Fetch the installer script, make it executable and run it.

    Returns the installer's exit status; interpreting it is up to the caller.
    """
    workspace.log.write("Installing pyenv\n")
    workspace.log.flush()

    installer = workspace.child(config.installer_file)
    await download_url(install_url, installer)

    try:
        installer.chmod(0o755)
    except OSError as e:
        raise IOFailure(
            f"Failed to make installer executable: {e}",
            details={"path": str(installer)},
        ) from e

    returncode = await run_workspace_command(workspace, [str(installer.resolve())])

    logger.info(
        {"event": "pyenv_installer_complete", "url": install_url, "returncode": returncode}
    )

    return returncode
