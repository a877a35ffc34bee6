"""Parsing of shell `export` listings into environment snapshots."""

import re

from mcp_pyenv.types import EnvSnapshot

DECLARE_PREFIX = "declare -x "

_LINE_BREAK = re.compile(r"[\n\r]")


def parse_export(text: str) -> EnvSnapshot:
    """Parse `declare -x NAME="value"` lines into a name -> value mapping.

    Lines without a `=` (exported but unset variables) are skipped, every
    double quote is stripped from the value and the last duplicate wins.
    """
    snapshot: EnvSnapshot = {}

    for line in _LINE_BREAK.split(text):
        if not line:
            continue

        name, sep, value = line.removeprefix(DECLARE_PREFIX).partition("=")
        if not sep or not name:
            continue

        snapshot[name] = value.replace('"', "")

    return snapshot
