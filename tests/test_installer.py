import os
import stat

import pytest
from aiohttp import web
from aiohttp import test_utils

from mcp_pyenv.errors import IOFailure
from mcp_pyenv.pyenv.installer import install_pyenv
from mcp_pyenv.utils.fetching import download_url

INSTALLER = b"#!/bin/sh\necho fetched installer ran\nexit 3\n"


def installer_app() -> web.Application:
    async def installer(request):
        return web.Response(body=INSTALLER)

    async def missing(request):
        return web.Response(status=404, text="not found")

    app = web.Application()
    app.router.add_get("/pyenv-installer", installer)
    app.router.add_get("/missing", missing)
    return app


@pytest.mark.asyncio
async def test_download_over_http(tmp_path):
    dest = tmp_path / "pyenv-installer"
    async with test_utils.TestServer(installer_app()) as server:
        await download_url(str(server.make_url("/pyenv-installer")), dest)

    assert dest.read_bytes() == INSTALLER


@pytest.mark.asyncio
async def test_download_bad_status_removes_partial(tmp_path):
    dest = tmp_path / "pyenv-installer"
    dest.write_text("stale")

    async with test_utils.TestServer(installer_app()) as server:
        with pytest.raises(IOFailure) as exc_info:
            await download_url(str(server.make_url("/missing")), dest)

    assert exc_info.value.details["status"] == 404
    assert not dest.exists()


@pytest.mark.asyncio
async def test_download_connection_error(tmp_path):
    dest = tmp_path / "pyenv-installer"
    with pytest.raises(IOFailure):
        await download_url("http://127.0.0.1:9/pyenv-installer", dest)
    assert not dest.exists()


@pytest.mark.asyncio
async def test_download_local_file(tmp_path):
    source = tmp_path / "source-installer"
    source.write_bytes(INSTALLER)
    dest = tmp_path / "pyenv-installer"

    await download_url(source.as_uri(), dest)

    assert dest.read_bytes() == INSTALLER


@pytest.mark.asyncio
async def test_download_missing_local_file(tmp_path):
    with pytest.raises(IOFailure):
        await download_url((tmp_path / "nope").as_uri(), tmp_path / "pyenv-installer")


@pytest.mark.asyncio
async def test_install_pyenv_runs_fetched_script(workspace):
    """Test the installer is fetched, made executable and its status returned"""
    async with test_utils.TestServer(installer_app()) as server:
        returncode = await install_pyenv(workspace, str(server.make_url("/pyenv-installer")))

    installer = workspace.child("pyenv-installer")
    mode = stat.S_IMODE(os.stat(installer).st_mode)

    assert returncode == 3
    assert mode == 0o755
    assert "Installing pyenv" in workspace.log.getvalue()
    assert "fetched installer ran" in workspace.log.getvalue()


@pytest.mark.asyncio
async def test_install_pyenv_download_failure(workspace, tmp_path):
    with pytest.raises(IOFailure):
        await install_pyenv(workspace, (tmp_path / "nope").as_uri())
