"""Workspace directory and command execution management."""

import asyncio
import codecs
import sys
import tempfile
from pathlib import Path
from typing import Optional, Sequence, TextIO

from fuuid import b58_fuuid

from mcp_pyenv.errors import IOFailure, SubprocessLaunchFailure
from mcp_pyenv.logging import get_logger
from mcp_pyenv.types import Workspace

logger = get_logger(__name__)


def create_workspace(
    prefix: str = "mcp-pyenv-",
    log: Optional[TextIO] = None,
    env_vars: Optional[dict[str, str]] = None,
) -> Workspace:
    """Create a workspace in a fresh temporary directory it owns."""

    temp_dir = tempfile.TemporaryDirectory(prefix=f"{prefix}{b58_fuuid()}-")
    workspace = Workspace(
        work_dir=Path(temp_dir.name),
        log=log or sys.stderr,
        env_vars=env_vars,
        temp_dir=temp_dir,
    )

    logger.info({"event": "workspace_created", "work_dir": str(workspace.work_dir)})

    return workspace


def open_workspace(
    path: Path | str,
    log: Optional[TextIO] = None,
    env_vars: Optional[dict[str, str]] = None,
) -> Workspace:
    """Wrap an existing directory as a workspace."""

    work_dir = Path(path).expanduser().resolve()
    if not work_dir.is_dir():
        raise IOFailure(
            f"Working directory does not exist: {work_dir}",
            details={"work_dir": str(work_dir)},
        )

    return Workspace(work_dir=work_dir, log=log or sys.stderr, env_vars=env_vars)


def cleanup_workspace(workspace: Workspace) -> None:
    """Remove the workspace directory if the workspace created it."""

    if workspace.temp_dir is None:
        return
    logger.debug({"event": "cleaning_workspace", "work_dir": str(workspace.work_dir)})
    workspace.temp_dir.cleanup()


async def _pipe_to_log(stream: asyncio.StreamReader, log: TextIO) -> None:
    # Fixed-size chunks; output is not required to contain newlines
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while chunk := await stream.read(8192):
        log.write(decoder.decode(chunk))
        log.flush()
    log.write(decoder.decode(b"", final=True))
    log.flush()


async def run_workspace_command(workspace: Workspace, args: Sequence[str]) -> int:
    """Run a command in the workspace, streaming its output into the log sink.

    Blocks until the child exits and returns its exit status. If streaming
    fails or the caller is cancelled the child is killed first.
    """

    logger.debug(
        {"event": "workspace_cmd_exec", "cmd": args[0], "cwd": str(workspace.work_dir)}
    )

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=workspace.work_dir,
            env=workspace.env_vars,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SubprocessLaunchFailure(
            f"Failed to launch {args[0]}: {e}", details={"cmd": args[0]}
        ) from e

    try:
        await asyncio.gather(
            _pipe_to_log(process.stdout, workspace.log),
            _pipe_to_log(process.stderr, workspace.log),
        )
        returncode = await process.wait()
    except Exception as e:
        raise SubprocessLaunchFailure(
            f"Failed to stream output of {args[0]}: {e}", details={"cmd": args[0]}
        ) from e
    finally:
        if process.returncode is None:
            process.kill()
            await process.wait()

    logger.debug(
        {"event": "workspace_cmd_complete", "cmd": args[0], "returncode": returncode}
    )

    return returncode


def read_workspace_file(workspace: Workspace, name: str) -> str:
    """Read a file relative to the workspace as text."""

    path = workspace.child(name)
    try:
        return path.read_text()
    except OSError as e:
        raise IOFailure(f"Failed to read {path}: {e}", details={"path": str(path)}) from e
