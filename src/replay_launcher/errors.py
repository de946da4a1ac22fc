from __future__ import annotations


class LauncherError(Exception):
    """Base class for failures the CLI reports as a one-line error."""


class LaunchError(LauncherError):
    """The game executable or wrapper could not be started."""


class ReplayError(LauncherError):
    """A replay file could not be read or unpacked."""
