from __future__ import annotations
import os
from dataclasses import dataclass
from subprocess import Popen
from typing import Optional

from .errors import LaunchError

DEFAULT_REPLAY_ID = 12345


@dataclass(frozen=True)
class LaunchConfig:
    # Kept as the raw strings the user typed: Path("./game") would become "game"
    # and send Popen on a PATH lookup.
    executable: str
    replay: str
    wrapper: Optional[str] = None
    switches: bool = False
    replay_id: int = DEFAULT_REPLAY_ID

    @property
    def program(self) -> str:
        """The file actually handed to the OS: the wrapper if set, else the game."""
        return self.wrapper if self.wrapper is not None else self.executable


def replay_switches(replay: str, replay_id: int = DEFAULT_REPLAY_ID) -> list[str]:
    """Command-line switches ForgedAlliance.exe expects for replay playback."""
    return [
        "/init",
        "init.lua",
        "/nobugreport",
        "/replay",
        replay,
        "/replayid",
        str(replay_id),
    ]


def _absolute_if_path(program: str) -> str:
    # bare names such as "wine" stay a PATH lookup
    if os.sep in program or (os.altsep and os.altsep in program):
        return os.path.abspath(program)
    return program


def launch_directory(cfg: LaunchConfig) -> Optional[str]:
    """
    Working directory for the child, or None to inherit ours.

    With the game switches, init.lua is looked up relative to the cwd, so the
    game has to start in its own bin directory.
    """
    if not cfg.switches:
        return None
    return os.path.dirname(os.path.abspath(cfg.executable))


def build_command(cfg: LaunchConfig) -> list[str]:
    """
    Build the argument vector for the child process.

      no wrapper:  <executable> <replay>
      wrapper:     <wrapper> <executable> <replay>

    Paths are passed through as given; nothing is resolved or checked here.
    The exception is switches mode: the child runs from the game directory
    (see launch_directory), so the paths are made absolute first.
    """
    executable, replay, wrapper = cfg.executable, cfg.replay, cfg.wrapper
    if cfg.switches:
        executable = os.path.abspath(executable)
        replay = os.path.abspath(replay)
        if wrapper is not None:
            wrapper = _absolute_if_path(wrapper)

    args: list[str] = []
    if wrapper is not None:
        args += [wrapper, executable]
    else:
        args.append(executable)

    if cfg.switches:
        args += replay_switches(replay, cfg.replay_id)
    else:
        args.append(replay)
    return args


def launch(cfg: LaunchConfig) -> Popen:
    """
    Start the game (or its wrapper) and return immediately.

    The child inherits our standard streams and gets its own session, so it
    keeps running after the launcher exits. It is never waited on.
    """
    cmd = build_command(cfg)
    try:
        return Popen(cmd, cwd=launch_directory(cfg), start_new_session=True)
    except FileNotFoundError:
        raise LaunchError(f"Failed to launch {cfg.program}: no such file") from None
    except PermissionError:
        raise LaunchError(f"Failed to launch {cfg.program}: permission denied") from None
    except OSError as e:
        reason = e.strerror or str(e)
        raise LaunchError(f"Failed to launch {cfg.program}: {reason}") from e
