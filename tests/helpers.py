from collections.abc import Sequence

from barrels_engine.domain.pose import POSE_JOINT_COUNT, Joint, JointFrame, Keypoint


def make_frame(
    index: int,
    *,
    fps: float = 60.0,
    wrist_x: float = 0.0,
    wrist_y: float = 0.0,
    visibility: float = 1.0,
    z: float | None = 0.0,
) -> JointFrame:
    """A full-skeleton frame with both wrists at (wrist_x, wrist_y) and every other joint at rest."""
    keypoints = [Keypoint(x=100.0, y=100.0, z=z, visibility=visibility) for _ in range(POSE_JOINT_COUNT)]
    keypoints[Joint.LEFT_WRIST] = Keypoint(x=wrist_x, y=wrist_y, z=z, visibility=visibility)
    keypoints[Joint.RIGHT_WRIST] = Keypoint(x=wrist_x, y=wrist_y + 10.0, z=z, visibility=visibility)
    return JointFrame(frame=index, timestamp=index / fps, keypoints=tuple(keypoints))


def frames_from_wrist_path(xs: Sequence[float], *, fps: float = 60.0, start: int = 0) -> list[JointFrame]:
    return [make_frame(start + i, fps=fps, wrist_x=x) for i, x in enumerate(xs)]


def spike_path(n: int, k: int, *, jump: float = 100.0) -> list[float]:
    """Wrists at rest, then one ``jump`` px move into frame ``k``, then at rest again."""
    return [0.0 if i < k else jump for i in range(n)]


def steady_path(n: int, *, step: float = 1.0) -> list[float]:
    return [i * step for i in range(n)]
