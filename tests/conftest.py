import io
import os
import shutil
from pathlib import Path

import pytest

from mcp_pyenv.types import Workspace
from mcp_pyenv.workspaces.workspace import open_workspace

FAKE_PYENV = """#!/bin/sh
case "$1" in
  init) echo 'export PYENV_SHELL=bash' ;;
  versions) echo '  system' ;;
  install|virtualenv) echo "$@" >> "$HOME/pyenv-calls.log" ;;
esac
exit 0
"""


def write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(0o755)
    return path


@pytest.fixture
def fixture_path() -> Path:
    """Static export captures"""
    return Path(__file__).parent.parent / "fixtures_data" / "exports"


@pytest.fixture
def home(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def base_path() -> str:
    bash = shutil.which("bash")
    dirs = [str(Path(bash).parent)] if bash else []
    dirs += ["/usr/bin", "/bin"]
    return os.pathsep.join(dict.fromkeys(dirs))


@pytest.fixture
def workspace(tmp_path, home, base_path) -> Workspace:
    """Workspace with an isolated HOME and a captured log"""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    return open_workspace(
        work_dir,
        log=io.StringIO(),
        env_vars={"HOME": str(home), "PATH": base_path},
    )


@pytest.fixture
def installer_url(tmp_path) -> str:
    """Installer that succeeds and leaves a marker in its working directory"""
    script = write_script(
        tmp_path / "scripts" / "ok-installer",
        "#!/bin/sh\necho installer running\ntouch installed.marker\nexit 0\n",
    )
    return script.as_uri()


@pytest.fixture
def failing_installer_url(tmp_path) -> str:
    script = write_script(
        tmp_path / "scripts" / "bad-installer",
        "#!/bin/sh\necho installer broke >&2\nexit 1\n",
    )
    return script.as_uri()


@pytest.fixture
def fake_pyenv(home) -> Path:
    """A pyenv stand-in under $HOME/.pyenv/bin that records install calls"""
    return write_script(home / ".pyenv" / "bin" / "pyenv", FAKE_PYENV)
