"""Shared pytest fixtures for test modules."""

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from barrels_engine.ingest.pose_json import frames_to_json
from tests.helpers import frames_from_wrist_path, spike_path


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None]:
    """Undo configure_logging() calls so handlers never outlive a test's captured streams."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def swing_file(tmp_path: Path) -> Path:
    """120 fps pose sequence with a sharp wrist stop at frame 300 of 600."""
    path = tmp_path / "swing.json"
    frames = frames_from_wrist_path(spike_path(600, 300), fps=120.0)
    path.write_text(json.dumps(frames_to_json(frames)))
    return path
