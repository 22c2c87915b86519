"""Impact-frame detection from wrist motion.

Bat-ball contact shows up in pose data as the sharpest drop in hand speed:
the wrists travel fast into the zone and decelerate abruptly at contact.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from barrels_engine.domain.impact import DetectionMethod, ImpactDetectionResult
from barrels_engine.domain.pose import Joint, JointFrame
from barrels_engine.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

_WRISTS = (Joint.LEFT_WRIST, Joint.RIGHT_WRIST)


@dataclass(frozen=True)
class ImpactConfig:
    edge_frames: int = 5  # frames at either end are too noisy to trust
    min_wrist_speed: float = 10.0  # px/frame
    confidence_scale: float = 50.0  # deceleration (px/frame) that maps to confidence 1.0


def _wrist_positions(frames: Sequence[JointFrame]) -> np.ndarray:
    """Return an (n, 2, 2) array of (left, right) wrist (x, y) per frame."""
    rows: list[list[tuple[float, float]]] = []
    for frame in frames:
        if not all(frame.has_joint(w) for w in _WRISTS):
            raise InvalidInputError(f"Frame {frame.frame} is missing wrist joints")
        rows.append([(frame.joint(w).x, frame.joint(w).y) for w in _WRISTS])
    return np.asarray(rows, dtype=float)


def wrist_speeds(frames: Sequence[JointFrame]) -> np.ndarray:
    """Average bilateral wrist speed between consecutive frames.

    Element ``j`` is the mean Euclidean displacement of the two wrists from
    frame ``j`` to frame ``j + 1``, so the result has ``len(frames) - 1``
    entries.
    """
    positions = _wrist_positions(frames)
    if len(positions) < 2:
        return np.zeros(0)
    step = np.linalg.norm(np.diff(positions, axis=0), axis=2)
    return step.mean(axis=1)


def detect_impact(
    frames: Sequence[JointFrame],
    fps: float,
    *,
    config: ImpactConfig | None = None,
) -> ImpactDetectionResult:
    """Locate the contact frame as the point of maximum wrist deceleration.

    Frame ``i`` is scored by ``speed(i-1 -> i) - speed(i -> i+1)`` and only
    considered when the incoming speed clears ``min_wrist_speed``. The first
    frame reaching the maximum wins. When nothing qualifies the sequence
    midpoint is returned with zero confidence.
    """
    if config is None:
        config = ImpactConfig()
    if not frames:
        raise InvalidInputError("No pose frames provided")
    if fps <= 0:
        raise InvalidInputError(f"fps must be positive, got {fps}")

    n = len(frames)
    speeds = wrist_speeds(frames)
    candidates = np.arange(max(config.edge_frames, 1), n - config.edge_frames)
    candidates = candidates[candidates < n - 1]

    if candidates.size:
        incoming = speeds[candidates - 1]
        outgoing = speeds[candidates]
        drops = incoming - outgoing
        eligible = (incoming > config.min_wrist_speed) & (drops > 0)
    else:
        eligible = np.zeros(0, dtype=bool)

    if not eligible.any():
        midpoint = n // 2
        logger.info(
            "No wrist deceleration above %.1f px/frame; defaulting impact to frame %d",
            config.min_wrist_speed,
            midpoint,
        )
        return ImpactDetectionResult(impact_frame=midpoint, confidence=0.0, method=DetectionMethod.AUTO)

    scored = np.where(eligible, drops, -np.inf)
    best = int(np.argmax(scored))
    max_drop = float(scored[best])
    impact_frame = int(candidates[best])
    confidence = min(max_drop / config.confidence_scale, 1.0)
    logger.debug(
        "Impact at frame %d of %d (drop %.2f px/frame, confidence %.2f, %.0f fps)",
        impact_frame,
        n,
        max_drop,
        confidence,
        fps,
    )
    return ImpactDetectionResult(impact_frame=impact_frame, confidence=confidence, method=DetectionMethod.AUTO)


def manual_impact(impact_frame: int, frame_count: int) -> ImpactDetectionResult:
    """Accept a coach-marked contact frame as-is."""
    if not 0 <= impact_frame < frame_count:
        raise InvalidInputError(f"Impact frame {impact_frame} outside sequence of {frame_count} frames")
    return ImpactDetectionResult(impact_frame=impact_frame, confidence=1.0, method=DetectionMethod.MANUAL)
