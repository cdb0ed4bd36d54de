"""Session configuration.

Usage:
    from burrow.core.config import Config

    config = Config.from_options(memory_size=500, color=False)

Environment Variables:
    DISABLE_BURROW: When set (to anything but "" / "0" / "false"), every
        session start is a no-op.
    BURROW_MEMORY_SIZE: Initial size of the input/output history.
    BURROW_NO_COLOR: Disable colored output.
    BURROW_NO_RC: Skip loading startup files.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any

from burrow.core.history import DEFAULT_MEMORY_SIZE

DISABLE_ENV_VAR = "DISABLE_BURROW"
HOME_RC_FILE = "~/.burrowrc"
LOCAL_RC_FILE = "./.burrowrc"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() not in _FALSE_VALUES


@dataclass
class Config:
    """Read-only settings for a session.

    Attributes:
        memory_size: max_size of both history arrays.
        color: Highlight output.
        should_load_rc: Load startup files at all.
        should_load_local_rc: Also load the project-local startup file.
        home_rc: Shared startup file path.
        local_rc: Project-local startup file path.
        prompt_name: Name shown in the prompt and diagnostics.
        extras: Options burrow does not know about, kept as given.
    """

    memory_size: int = DEFAULT_MEMORY_SIZE
    color: bool = True
    should_load_rc: bool = True
    should_load_local_rc: bool = True
    home_rc: str = HOME_RC_FILE
    local_rc: str = LOCAL_RC_FILE
    prompt_name: str = "burrow"
    extras: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (
            not isinstance(self.memory_size, int)
            or isinstance(self.memory_size, bool)
            or self.memory_size < 1
        ):
            raise ValueError(f"memory_size must be a positive integer, got {self.memory_size!r}")

    @classmethod
    def from_options(cls, **options: Any) -> Config:
        """Build a config, keeping unrecognized options in ``extras``."""
        return cls().with_options(**options)

    def with_options(self, **options: Any) -> Config:
        """Copy with known fields replaced and unknown options added to ``extras``."""
        known = {f.name for f in dataclasses.fields(self)} - {"extras"}
        extras = {**self.extras, **(options.pop("extras", None) or {})}
        changes = {}
        for key, value in options.items():
            if key in known:
                changes[key] = value
            else:
                extras[key] = value
        return self.replace(extras=extras, **changes)

    @classmethod
    def from_env(cls, **options: Any) -> Config:
        """Build a config from environment variables, then ``options``."""
        env: dict[str, Any] = {}
        memory_size = os.environ.get("BURROW_MEMORY_SIZE")
        if memory_size:
            env["memory_size"] = int(memory_size)
        if _env_flag("BURROW_NO_COLOR"):
            env["color"] = False
        if _env_flag("BURROW_NO_RC"):
            env["should_load_rc"] = False
        env.update(options)
        return cls.from_options(**env)

    @property
    def disabled(self) -> bool:
        """Whether the process-wide disable switch is set (read at call time)."""
        return _env_flag(DISABLE_ENV_VAR)

    def rc_paths(self) -> list[str]:
        """Startup files to load, in order."""
        if not self.should_load_rc:
            return []
        paths = [self.home_rc]
        if self.should_load_local_rc:
            paths.append(self.local_rc)
        return paths

    def replace(self, **changes: Any) -> Config:
        return dataclasses.replace(self, **changes)
