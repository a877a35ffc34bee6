import os

from mcp_pyenv.config import DEFAULT_CONFIG, DEFAULT_INSTALL_URL, load_config


def test_defaults():
    assert DEFAULT_CONFIG.install_url == DEFAULT_INSTALL_URL
    assert DEFAULT_CONFIG.candidate_dirs == ("~/tools/pyenv/bin", "~/.pyenv/bin")
    assert DEFAULT_CONFIG.managed_path_key == "PATH+PYENV"
    assert DEFAULT_CONFIG.before_file == "before.env"
    assert DEFAULT_CONFIG.after_file == "pyenv.env"
    assert DEFAULT_CONFIG.installer_file == "pyenv-installer"


def test_load_config_without_overrides():
    assert load_config({}) == DEFAULT_CONFIG


def test_load_config_overrides():
    config = load_config({
        "MCP_PYENV_INSTALL_URL": "https://mirror.example/pyenv-installer",
        "MCP_PYENV_SHELL": "/usr/local/bin/bash",
        "MCP_PYENV_LOG_LEVEL": "debug",
        "MCP_PYENV_CANDIDATE_DIRS": os.pathsep.join(["/opt/pyenv/bin", "", "~/.pyenv/bin"]),
    })

    assert config.install_url == "https://mirror.example/pyenv-installer"
    assert config.shell == "/usr/local/bin/bash"
    assert config.log_level == "DEBUG"
    assert config.candidate_dirs == ("/opt/pyenv/bin", "~/.pyenv/bin")
    assert config.path_var == "PATH"
