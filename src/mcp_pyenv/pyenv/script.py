"""Activation script rendering.

The rendered text is run by an external shell, so the templates below are the
exact command sequence: each candidate directory gets a block that puts its
`pyenv` on PATH and evaluates `pyenv init`, the blocks are joined with `||` so
the first existing directory wins, and only then is the interpreter installed,
the virtualenv created and selected, and the environment exported.
"""

from typing import Sequence

from mcp_pyenv.types import VersionSpec

CANDIDATE_TEMPLATE = (
    "{{ \n"
    "  [ -d {path} ] && \n"
    "  export PATH={path}:$PATH && \n"
    '  eval "$({path}/pyenv init - )"; \n'
    "}}"
)

ACTIVATION_TEMPLATE = (
    "{candidates}"
    " && {{\n"
    '  pyenv versions --skip-aliases | grep -q "{version}" \\\n'
    '  || pyenv install -s "{version}"; \n'
    "}} && {{\n"
    '  pyenv versions --skip-aliases | grep -q "{env_name}" \\\n'
    '  || pyenv virtualenv {version} "{env_name}";\n'
    "}} \\\n"
    '&& export PYENV_VERSION="{env_name}" \\\n'
    "&& export > {export_file}"
)

BASELINE_TEMPLATE = "export > {export_file}"


def render_candidates(candidate_dirs: Sequence[str]) -> str:
    if not candidate_dirs:
        raise ValueError("At least one pyenv candidate directory is required")
    return " || ".join(CANDIDATE_TEMPLATE.format(path=path) for path in candidate_dirs)


def render_activation_script(
    spec: VersionSpec, candidate_dirs: Sequence[str], export_file: str
) -> str:
    return ACTIVATION_TEMPLATE.format(
        candidates=render_candidates(candidate_dirs),
        version=spec.version,
        env_name=spec.env_name,
        export_file=export_file,
    )


def render_baseline_script(export_file: str) -> str:
    return BASELINE_TEMPLATE.format(export_file=export_file)
