"""MCP server implementation."""
import asyncio
import io
import json
import os
import sys
from typing import Any, Dict, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions
from mcp.server import stdio

from mcp_pyenv.config import PyenvConfig, load_config
from mcp_pyenv.logging import configure_logging, get_logger
from mcp_pyenv.pyenv.differ import apply_delta, compute_delta
from mcp_pyenv.types import DeltaResult
from mcp_pyenv.workspaces.workspace import (
    cleanup_workspace,
    create_workspace,
    open_workspace,
    run_workspace_command,
)

logger = get_logger("server")

tools = [
    types.Tool(
        name="pyenv_compute_env",
        description="Compute the environment variables that activate a pyenv virtualenv for a build job",
        inputSchema={
            "type": "object",
            "properties": {
                "job_name": {"type": "string", "description": "Job name the virtualenv is named after"},
                "python_version": {"type": "string", "description": "Python version to install"},
                "installer_url": {"type": "string", "description": "pyenv installer script URL"},
                "working_dir": {"type": "string", "description": "Job working directory"},
            },
            "required": ["job_name", "python_version"],
        },
    ),
    types.Tool(
        name="pyenv_run",
        description="Run a shell command in a working directory with a pyenv virtualenv activated",
        inputSchema={
            "type": "object",
            "properties": {
                "working_dir": {"type": "string", "description": "Job working directory"},
                "job_name": {"type": "string", "description": "Job name the virtualenv is named after"},
                "python_version": {"type": "string", "description": "Python version to install"},
                "command": {"type": "string", "description": "Shell command to run"},
                "installer_url": {"type": "string", "description": "pyenv installer script URL"},
                "overwrite_path": {
                    "type": "boolean",
                    "description": "Replace PATH entirely instead of prepending the pyenv entries",
                },
            },
            "required": ["working_dir", "job_name", "python_version", "command"],
        },
    ),
]


def _text(payload: Dict[str, Any]) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload))]


def _failure(result: DeltaResult) -> list[types.TextContent]:
    error = result.error
    return _text({
        "success": False,
        "error": str(error),
        "code": error.code,
        "details": error.details,
    })


def _missing_arguments(name: str, arguments: Dict[str, Any]) -> list[str]:
    tool = next((t for t in tools if t.name == name), None)
    if tool is None:
        return []
    return [
        arg for arg in tool.inputSchema.get("required", [])
        if arguments.get(arg) in (None, "")
    ]


async def handle_tool_call(
    name: str, arguments: Dict[str, Any], config: PyenvConfig
) -> list[types.TextContent]:
    """Dispatch one tool call; failures are reported in the payload, never raised."""
    try:
        logger.debug(f"Tool call received: {name} with arguments {arguments}")

        arguments = arguments or {}
        if missing := _missing_arguments(name, arguments):
            return _text({
                "success": False,
                "error": f"Missing required argument(s) for {name}: {', '.join(missing)}",
            })

        if name == "pyenv_compute_env":
            if arguments.get("working_dir"):
                workspace = open_workspace(arguments["working_dir"])
            else:
                workspace = create_workspace()
            try:
                result = await compute_delta(
                    workspace,
                    arguments["job_name"],
                    arguments["python_version"],
                    arguments.get("installer_url"),
                    config,
                )
            finally:
                cleanup_workspace(workspace)

            if not result.ok:
                return _failure(result)
            return _text({"success": True, "data": {"env": result.delta}})

        elif name == "pyenv_run":
            workspace = open_workspace(arguments["working_dir"])
            result = await compute_delta(
                workspace,
                arguments["job_name"],
                arguments["python_version"],
                arguments.get("installer_url"),
                config,
            )
            if not result.ok:
                return _failure(result)

            output = io.StringIO()
            run_workspace = open_workspace(
                workspace.work_dir,
                log=output,
                env_vars=apply_delta(
                    os.environ,
                    result.delta,
                    config,
                    overwrite_path=arguments.get("overwrite_path", True),
                ),
            )
            returncode = await run_workspace_command(
                run_workspace, [config.shell, "-c", arguments["command"]]
            )
            return _text({
                "success": returncode == 0,
                "data": {
                    "returncode": returncode,
                    "output": output.getvalue(),
                    "env": result.delta,
                },
            })

        return _text({"success": False, "error": f"Unknown tool: {name}"})

    except ValueError as e:
        # Rejected job name or version
        logger.warning({"event": "invalid_tool_arguments", "tool": name, "error": str(e)})
        return _text({"success": False, "error": f"Invalid arguments for {name}: {e}"})

    except Exception as e:
        logger.exception(f"Tool invocation failed: {e}")
        return _text({"success": False, "error": str(e)})


async def init_server(config: PyenvConfig) -> Server:
    logger.info(f"Registered tools: {', '.join(t.name for t in tools)}")

    server = Server("mcp-pyenv")

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        logger.debug("Tools requested")
        return tools

    @server.call_tool()
    async def call_tool(
        name: str, arguments: Dict[str, Any]
    ) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
        return await handle_tool_call(name, arguments, config)

    return server


async def serve() -> None:
    config = load_config()
    configure_logging(config.log_level)
    logger.info("Starting MCP pyenv server")

    server = await init_server(config)
    async with stdio.stdio_server() as (read_stream, write_stream):
        init_options = InitializationOptions(
            server_name="mcp-pyenv",
            server_version="0.1.0",
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                logging=types.LoggingCapability(),
            ),
        )
        await server.run(read_stream, write_stream, init_options)


def main() -> None:
    """Run the MCP server."""
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception:
        logger.exception("Fatal server error")
        sys.exit(1)
