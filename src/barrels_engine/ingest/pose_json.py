"""Pose sequences as JSON.

The on-disk shape is a list of frames, each
``{"frame": int, "timestamp": float, "keypoints": [{"x", "y", "z", "visibility"}, ...]}``.
A top-level object with a ``frames`` list is also accepted, which is what
pose extractors write when they include clip metadata alongside the frames.
"""

import json
import logging
import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from barrels_engine.domain.errors import IngestError
from barrels_engine.domain.pose import JointFrame, Keypoint
from barrels_engine.domain.result import Err, Ok, Result
from barrels_engine.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{what} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{what} must be finite, got {value!r}")
    return float(value)


def _parse_keypoint(raw: Any, where: str) -> Keypoint:
    if not isinstance(raw, dict):
        raise InvalidInputError(f"{where} must be an object")
    z = raw.get("z")
    return Keypoint(
        x=_number(raw.get("x"), f"{where}.x"),
        y=_number(raw.get("y"), f"{where}.y"),
        z=_number(z, f"{where}.z") if z is not None else None,
        visibility=_number(raw.get("visibility", 1.0), f"{where}.visibility"),
    )


def _parse_frame(raw: Any, position: int) -> JointFrame:
    if not isinstance(raw, dict):
        raise InvalidInputError(f"Frame at position {position} must be an object")
    keypoints = raw.get("keypoints")
    if not isinstance(keypoints, list):
        raise InvalidInputError(f"Frame at position {position} has no keypoints list")
    index = raw.get("frame", position)
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidInputError(f"Frame at position {position} has a non-integer index {index!r}")
    return JointFrame(
        frame=index,
        timestamp=_number(raw.get("timestamp", 0.0), f"frame {index} timestamp"),
        keypoints=tuple(_parse_keypoint(kp, f"frame {index} keypoint {j}") for j, kp in enumerate(keypoints)),
    )


def parse_pose_frames(raw: Any) -> list[JointFrame]:
    """Build frames from decoded JSON, raising InvalidInputError on the first bad field."""
    if isinstance(raw, dict):
        raw = raw.get("frames")
    if not isinstance(raw, list):
        raise InvalidInputError("Pose data must be a list of frames")
    return [_parse_frame(item, i) for i, item in enumerate(raw)]


def frames_to_json(frames: Sequence[JointFrame]) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []
    for frame in frames:
        keypoints: list[dict[str, Any]] = []
        for kp in frame.keypoints:
            entry: dict[str, Any] = {"x": kp.x, "y": kp.y}
            if kp.z is not None:
                entry["z"] = kp.z
            entry["visibility"] = kp.visibility
            keypoints.append(entry)
        result.append({"frame": frame.frame, "timestamp": frame.timestamp, "keypoints": keypoints})
    return result


def load_pose_frames(path: str | Path) -> Result[list[JointFrame], IngestError]:
    source_detail = str(path)
    logger.info("Loading pose frames from %s", source_detail)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        frames = parse_pose_frames(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, InvalidInputError) as exc:
        logger.error("Pose import failed for %s: %s", source_detail, exc)
        return Err(IngestError(message=str(exc), source_type="json", source_detail=source_detail))
    logger.debug("Loaded %d pose frames from %s", len(frames), source_detail)
    return Ok(frames)
