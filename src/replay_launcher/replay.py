from __future__ import annotations
import base64
import binascii
import json
import tempfile
import zlib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ReplayError

__all__ = [
    "ReplayType",
    "LegacyReplay",
    "detect_replay_type",
    "read_legacy_replay",
    "unpack_legacy_replay",
    "prepare_replay",
]

# qCompress prefixes the zlib stream with the uncompressed size (uint32, big-endian)
_QT_HEADER_SIZE = 4


class ReplayType(Enum):
    UNKNOWN = "unknown"
    FORGED_ALLIANCE = ".scfareplay"
    FAF_LEGACY = ".fafreplay"


@dataclass
class LegacyReplay:
    metadata: Dict[str, Any]
    stream: bytes


def detect_replay_type(path: Path) -> ReplayType:
    suffix = Path(path).suffix.lower()
    for kind in (ReplayType.FORGED_ALLIANCE, ReplayType.FAF_LEGACY):
        if suffix == kind.value:
            return kind
    return ReplayType.UNKNOWN


def _decode_stream(line: bytes) -> bytes:
    try:
        packed = base64.b64decode(line, validate=True)
    except (binascii.Error, ValueError):
        raise ReplayError("Replay corrupt - couldn't decode base64") from None
    if len(packed) < _QT_HEADER_SIZE:
        raise ReplayError("Replay corrupt - compressed stream is truncated")
    try:
        return zlib.decompress(packed[_QT_HEADER_SIZE:])
    except zlib.error as e:
        raise ReplayError(f"Replay corrupt - couldn't inflate stream: {e}") from None


def read_legacy_replay(path: Path) -> LegacyReplay:
    """
    Read a FAForever .fafreplay container.

    Layout:
      line 1: JSON object with the game metadata
      line 2: base64( uint32 size | zlib stream )
    """
    path = Path(path)
    try:
        with path.open("rb") as fh:
            header = fh.readline().strip()
            body = fh.readline().strip()
    except OSError as e:
        raise ReplayError(f"Cannot read replay {path}: {e.strerror or e}") from None

    if not header:
        raise ReplayError("Replay corrupt - replay metadata json is missing")
    try:
        metadata = json.loads(header)
    except ValueError as e:
        raise ReplayError(f"Replay corrupt - malformed metadata json: {e}") from None
    if not isinstance(metadata, dict):
        raise ReplayError(
            f"Replay corrupt - metadata must be a JSON object (got {type(metadata).__name__})"
        )

    if not body:
        raise ReplayError("Replay corrupt - binary replay stream is missing")
    return LegacyReplay(metadata=metadata, stream=_decode_stream(body))


def unpack_legacy_replay(path: Path, directory: Optional[Path] = None) -> Path:
    """
    Write the raw game stream of a .fafreplay to a new .scfareplay file.

    The file is left in place: the game opens it after we have exited.
    """
    replay = read_legacy_replay(path)
    prefix = f"{Path(path).stem}-"
    out = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            prefix=prefix,
            suffix=ReplayType.FORGED_ALLIANCE.value,
            dir=str(directory) if directory is not None else None,
            delete=False,
        ) as out:
            out.write(replay.stream)
    except OSError as e:
        if out is not None:
            Path(out.name).unlink(missing_ok=True)
        raise ReplayError(f"Cannot write unpacked replay: {e.strerror or e}") from None
    return Path(out.name)


def prepare_replay(path: Union[str, Path], directory: Optional[Path] = None) -> Union[str, Path]:
    """Return a path the game can play: legacy containers are unpacked, anything else passes through."""
    if detect_replay_type(Path(path)) is ReplayType.FAF_LEGACY:
        return unpack_legacy_replay(Path(path), directory)
    return path
