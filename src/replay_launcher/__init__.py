"""Replay launcher: start Forged Alliance (or a wrapper script) on a replay file."""
from __future__ import annotations

from .errors import LauncherError, LaunchError, ReplayError
from .launcher import LaunchConfig, build_command, launch
from .replay import ReplayType, detect_replay_type, prepare_replay

__version__ = "0.1"

__all__ = [
    "LauncherError",
    "LaunchError",
    "ReplayError",
    "LaunchConfig",
    "build_command",
    "launch",
    "ReplayType",
    "detect_replay_type",
    "prepare_replay",
    "__version__",
]
