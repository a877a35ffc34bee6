import shutil
from pathlib import Path
from urllib.parse import unquote, urlparse

import aiohttp

from mcp_pyenv.errors import IOFailure
from mcp_pyenv.logging import get_logger

logger = get_logger(__name__)


def _copy_local(url: str, dest: Path) -> None:
    source = Path(unquote(urlparse(url).path))
    try:
        shutil.copyfile(source, dest)
    except OSError as e:
        raise IOFailure(
            f"Failed to copy {source}: {e}", details={"url": url}
        ) from e


async def download_url(url: str, dest: Path) -> None:
    """Download url into dest, removing any partial file on failure."""

    logger.debug({"event": "download_url", "url": url, "dest": str(dest)})

    try:
        if urlparse(url).scheme == "file":
            _copy_local(url, dest)
        else:
            async with aiohttp.ClientSession() as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise IOFailure(
                            f"Download failed with status {response.status}",
                            details={"url": url, "status": response.status},
                        )

                    with open(dest, "wb") as f:
                        async for chunk in response.content.iter_chunked(8192):
                            f.write(chunk)

    except IOFailure:
        dest.unlink(missing_ok=True)
        raise
    except (aiohttp.ClientError, OSError, ValueError) as e:
        dest.unlink(missing_ok=True)
        raise IOFailure(f"Failed to download url: {e}", details={"url": url}) from e

    logger.info({"event": "url_downloaded", "url": url, "dest": str(dest)})
