from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

from . import __version__
from .errors import LauncherError
from .launcher import DEFAULT_REPLAY_ID, LaunchConfig, launch
from .replay import prepare_replay

PROG = "replay-launcher"


def _replay_id(raw: str) -> int:
    try:
        value = int(raw, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid replay id: {raw!r}") from None
    if not 0 <= value <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"replay id out of range: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description="A replay launcher for FAForever: opens a replay file in ForgedAlliance.exe.",
    )
    p.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    p.add_argument(
        "-e",
        "--executable",
        required=True,
        metavar="PATH",
        help="Path to the ForgedAlliance.exe",
    )
    p.add_argument(
        "-f",
        "--local-file",
        required=True,
        metavar="FILE",
        help="Path to the replay file you want to watch",
    )
    p.add_argument(
        "-w",
        "--wrapper",
        metavar="WRAPPER",
        help="Path to the wrapper script (usually for Linux)",
    )

    # optional replay handling, off unless asked for
    p.add_argument(
        "-u",
        "--unpack",
        action="store_true",
        help="Unpack a legacy .fafreplay into a raw .scfareplay before launching",
    )
    p.add_argument(
        "-s",
        "--switches",
        action="store_true",
        help="Pass the game's replay switches (/init init.lua /nobugreport /replay ...) "
        "instead of the bare replay path",
    )
    p.add_argument(
        "--replay-id",
        type=_replay_id,
        metavar="N",
        help=f"Replay id passed with --switches; only valid together with it "
        f"(default: {DEFAULT_REPLAY_ID})",
    )
    p.add_argument("-q", "--quiet", action="store_true")
    return p


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    if args.replay_id is not None and not args.switches:
        parser.error("--replay-id only applies together with --switches")

    unpacked: Optional[Path] = None
    try:
        replay = args.local_file
        if args.unpack:
            prepared = prepare_replay(replay)
            if isinstance(prepared, Path):
                unpacked = prepared
            replay = str(prepared)

        cfg = LaunchConfig(
            executable=args.executable,
            replay=replay,
            wrapper=args.wrapper,
            switches=args.switches,
            replay_id=args.replay_id if args.replay_id is not None else DEFAULT_REPLAY_ID,
        )
        proc = launch(cfg)
    except LauncherError as e:
        # nothing will ever read an unpacked replay we failed to hand over
        if unpacked is not None:
            unpacked.unlink(missing_ok=True)
        print(f"[{PROG}] error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"[{PROG}] launched {cfg.program} (pid {proc.pid})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
