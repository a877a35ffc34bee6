"""Core type definitions"""

from dataclasses import dataclass
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Optional, TextIO

from mcp_pyenv.errors import PyenvEnvError

EnvSnapshot = dict[str, str]
EnvDelta = dict[str, str]

# Would break out of a double-quoted word in the activation script
_UNSAFE_CHARS = frozenset('"`$\\\n\r')


@dataclass(frozen=True)
class VersionSpec:
    """Target interpreter version and the name its virtualenv is keyed on"""
    name: str
    version: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("Environment name is required")
        if not self.version:
            raise ValueError("Python version is required")
        for field, value in (("name", self.name), ("version", self.version)):
            if _UNSAFE_CHARS.intersection(value):
                raise ValueError(f"Invalid characters in {field}: {value!r}")
        if any(c.isspace() for c in self.version):
            raise ValueError(f"Python version may not contain whitespace: {self.version!r}")

    @property
    def env_name(self) -> str:
        return f"{self.name}-{self.version}"


@dataclass(frozen=True)
class Workspace:
    """Working directory that captures and installers run in"""
    work_dir: Path
    log: TextIO
    env_vars: Optional[dict[str, str]] = None
    temp_dir: Optional[TemporaryDirectory] = None

    def child(self, name: str) -> Path:
        return self.work_dir / name


@dataclass(frozen=True)
class DeltaResult:
    """Outcome of a delta computation: either a delta or the error that stopped it"""
    delta: Optional[EnvDelta] = None
    error: Optional[PyenvEnvError] = None

    def __post_init__(self):
        if (self.delta is None) == (self.error is None):
            raise ValueError("DeltaResult needs exactly one of delta or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> EnvDelta:
        if self.error is not None:
            raise self.error
        return self.delta
