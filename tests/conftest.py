from __future__ import annotations
import base64
import json
import struct
import zlib
from pathlib import Path

import pytest

from replay_launcher import launcher


class FakePopen:
    """Stands in for subprocess.Popen and remembers every spawn."""

    calls: list = []

    def __init__(self, args, **kwargs) -> None:
        self.args = list(args)
        self.kwargs = kwargs
        self.pid = 4242
        FakePopen.calls.append(self)


@pytest.fixture
def spawned(monkeypatch):
    FakePopen.calls = []
    monkeypatch.setattr(launcher, "Popen", FakePopen)
    return FakePopen.calls


def make_legacy_replay(path: Path, raw: bytes, metadata=None) -> Path:
    packed = struct.pack(">I", len(raw)) + zlib.compress(raw)
    header = json.dumps(metadata if metadata is not None else {"uid": 1, "featured_mod": "faf"})
    path.write_bytes(header.encode("utf-8") + b"\n" + base64.b64encode(packed) + b"\n")
    return path


@pytest.fixture
def legacy_replay(tmp_path):
    raw = b"Supreme Commander v1.50.3701\r\n\x00" + bytes(range(256)) * 4
    return make_legacy_replay(tmp_path / "12345.fafreplay", raw), raw
