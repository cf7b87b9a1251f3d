"""Tests for the command-line entry point (no camera needed)."""

import pytest

pytest.importorskip("mediapipe")

from capture_booth import main as booth_main  # noqa: E402
from capture_booth.errors import KeypointSourceError  # noqa: E402


class _BrokenSource:
    def __init__(self, camera_index, use_mesh):
        self.camera_index = camera_index
        self.use_mesh = use_mesh

    def start(self):
        raise KeypointSourceError(f"Cannot open camera {self.camera_index}")


def test_parser_defaults():
    args = booth_main._build_parser().parse_args([])
    assert args.policy == "strict"
    assert not args.no_preview


def test_parser_rejects_unknown_policy():
    with pytest.raises(SystemExit):
        booth_main._build_parser().parse_args(["--policy", "wave"])


def test_startup_failure_exits_nonzero(monkeypatch, caplog):
    monkeypatch.setattr(booth_main, "KeypointSource", _BrokenSource)
    assert booth_main.main(["--camera", "7", "--no-preview"]) == 1
    assert "Cannot open camera 7" in caplog.text
