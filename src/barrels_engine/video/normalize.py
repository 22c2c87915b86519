import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

from barrels_engine.domain.impact import ImpactDetectionResult, TrimRange
from barrels_engine.domain.pose import POSE_JOINT_COUNT, JointFrame, Keypoint
from barrels_engine.exceptions import InvalidInputError
from barrels_engine.video.impact import ImpactConfig, detect_impact, manual_impact

logger = logging.getLogger(__name__)

CANONICAL_FPS = 60.0
_FRACTION_EPSILON = 1e-9


@dataclass(frozen=True)
class NormalizeConfig:
    target_fps: float = CANONICAL_FPS
    trim_seconds: float = 2.0


@dataclass(frozen=True)
class PreparedSwing:
    impact: ImpactDetectionResult
    trim_range: TrimRange
    frames: list[JointFrame]
    source_fps: float
    target_fps: float

    @property
    def normalized_impact_frame(self) -> int:
        """Impact frame expressed in the trimmed, resampled sequence."""
        offset = self.impact.impact_frame - self.trim_range.start_frame
        index = round(offset * self.target_fps / self.source_fps)
        return min(max(index, 0), max(len(self.frames) - 1, 0))


def calculate_trim_range(
    impact_frame: int,
    fps: float,
    total_frames: int,
    *,
    window_seconds: float = 2.0,
) -> TrimRange:
    if total_frames <= 0:
        raise InvalidInputError("Cannot trim an empty sequence")
    if not 0 <= impact_frame < total_frames:
        raise InvalidInputError(f"Impact frame {impact_frame} outside sequence of {total_frames} frames")
    window = math.floor(fps * window_seconds)
    return TrimRange(
        start_frame=max(0, impact_frame - window),
        end_frame=min(total_frames - 1, impact_frame + window),
    )


def trim_frames(frames: Sequence[JointFrame], start_frame: int, end_frame: int) -> list[JointFrame]:
    """Keep frames whose index falls in [start_frame, end_frame], re-indexed from 0."""
    kept = [f for f in frames if start_frame <= f.frame <= end_frame]
    return [replace(f, frame=i) for i, f in enumerate(kept)]


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _interpolate_keypoint(lower: Keypoint, upper: Keypoint, t: float) -> Keypoint:
    z = _lerp(lower.z, upper.z, t) if lower.z is not None and upper.z is not None else None
    return Keypoint(
        x=_lerp(lower.x, upper.x, t),
        y=_lerp(lower.y, upper.y, t),
        z=z,
        visibility=max(lower.visibility, upper.visibility),
    )


def _interpolate_frame(lower: JointFrame, upper: JointFrame, t: float, index: int) -> JointFrame:
    if len(lower.keypoints) != len(upper.keypoints):
        raise InvalidInputError(
            f"Frames {lower.frame} and {upper.frame} have different joint counts "
            f"({len(lower.keypoints)} vs {len(upper.keypoints)})"
        )
    keypoints = tuple(_interpolate_keypoint(a, b, t) for a, b in zip(lower.keypoints, upper.keypoints, strict=True))
    return JointFrame(frame=index, timestamp=_lerp(lower.timestamp, upper.timestamp, t), keypoints=keypoints)


def resample_frames(
    frames: Sequence[JointFrame],
    source_fps: float,
    target_fps: float = CANONICAL_FPS,
) -> list[JointFrame]:
    """Resample a pose sequence to ``target_fps`` by linear interpolation.

    Produces ``floor(n / (source_fps / target_fps))`` frames. Output frame
    ``i`` samples the source at ``i * source_fps / target_fps``; between two
    source frames coordinates and timestamps are interpolated and visibility
    takes the larger of the two, so a joint is never reported as less visible
    than both of its neighbours.
    """
    if source_fps <= 0 or target_fps <= 0:
        raise InvalidInputError(f"Frame rates must be positive, got {source_fps} -> {target_fps}")
    if source_fps == target_fps:
        return list(frames)
    if not frames:
        return []

    ratio = source_fps / target_fps
    count = math.floor(len(frames) / ratio)
    last = len(frames) - 1
    resampled: list[JointFrame] = []
    for i in range(count):
        source_index = i * ratio
        lower = math.floor(source_index)
        upper = min(math.ceil(source_index), last)
        t = source_index - lower
        if lower >= last or lower == upper or t < _FRACTION_EPSILON:
            resampled.append(replace(frames[min(lower, last)], frame=i))
        else:
            resampled.append(_interpolate_frame(frames[lower], frames[upper], t, i))

    logger.debug("Resampled %d frames at %.1f fps to %d frames at %.1f fps", len(frames), source_fps, count, target_fps)
    return resampled


def validate_pose_sequence(frames: Sequence[JointFrame]) -> list[str]:
    """Collect every structural problem with a pose sequence."""
    if not frames:
        return ["Pose sequence is empty"]

    errors: list[str] = []
    previous: int | None = None
    for frame in frames:
        if len(frame.keypoints) != POSE_JOINT_COUNT:
            errors.append(f"Frame {frame.frame} has {len(frame.keypoints)} keypoints, expected {POSE_JOINT_COUNT}")
        if any(not 0.0 <= kp.visibility <= 1.0 for kp in frame.keypoints):
            errors.append(f"Frame {frame.frame} has visibility outside [0, 1]")
        if previous is not None and frame.frame <= previous:
            errors.append(f"Frame index {frame.frame} does not follow {previous}")
        previous = frame.frame
    return errors


def prepare_swing(
    frames: Sequence[JointFrame],
    source_fps: float,
    *,
    manual_impact_frame: int | None = None,
    impact_config: ImpactConfig | None = None,
    config: NormalizeConfig | None = None,
) -> PreparedSwing:
    """Detect impact, trim to the window around it, and resample to the canonical rate."""
    if config is None:
        config = NormalizeConfig()
    errors = validate_pose_sequence(frames)
    if errors:
        raise InvalidInputError("; ".join(errors))

    # Impact and trim ranges are positional
    indexed = trim_frames(frames, frames[0].frame, frames[-1].frame)
    if manual_impact_frame is not None:
        impact = manual_impact(manual_impact_frame, len(indexed))
    else:
        impact = detect_impact(indexed, source_fps, config=impact_config)

    trim_range = calculate_trim_range(
        impact.impact_frame, source_fps, len(indexed), window_seconds=config.trim_seconds
    )
    trimmed = trim_frames(indexed, trim_range.start_frame, trim_range.end_frame)
    normalized = resample_frames(trimmed, source_fps, config.target_fps)
    logger.debug(
        "Prepared swing: impact %d (%s), kept frames %d-%d, %d normalized frames",
        impact.impact_frame,
        impact.method,
        trim_range.start_frame,
        trim_range.end_frame,
        len(normalized),
    )
    return PreparedSwing(
        impact=impact,
        trim_range=trim_range,
        frames=normalized,
        source_fps=source_fps,
        target_fps=config.target_fps,
    )
