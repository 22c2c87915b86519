import pytest

from barrels_engine.domain.impact import DetectionMethod
from barrels_engine.domain.pose import JointFrame, Keypoint
from barrels_engine.exceptions import InvalidInputError
from barrels_engine.video.impact import ImpactConfig, detect_impact, manual_impact, wrist_speeds
from tests.helpers import frames_from_wrist_path, spike_path, steady_path


def _two_speed_path(n: int, k: int, before: float, after: float) -> list[float]:
    """Wrists move ``before`` px/frame up to frame ``k`` and ``after`` px/frame from then on."""
    xs = [0.0]
    for i in range(1, n):
        xs.append(xs[-1] + (before if i <= k else after))
    return xs


class TestWristSpeeds:
    def test_one_speed_per_frame_pair(self) -> None:
        frames = frames_from_wrist_path(steady_path(10, step=3.0))
        speeds = wrist_speeds(frames)
        assert len(speeds) == 9
        assert speeds.tolist() == pytest.approx([3.0] * 9)

    def test_single_frame_has_no_speeds(self) -> None:
        assert len(wrist_speeds(frames_from_wrist_path([0.0]))) == 0

    def test_averages_both_wrists(self) -> None:
        left_only = [
            JointFrame(
                frame=i,
                timestamp=i / 60,
                keypoints=tuple(Keypoint(x=4.0 * i if j == 15 else 0.0, y=0.0) for j in range(33)),
            )
            for i in range(3)
        ]
        assert wrist_speeds(left_only).tolist() == pytest.approx([2.0, 2.0])


class TestDetectImpact:
    def test_isolated_spike_is_found_with_high_confidence(self) -> None:
        frames = frames_from_wrist_path(spike_path(60, 30))
        result = detect_impact(frames, 60.0)
        assert result.impact_frame == 30
        assert result.confidence > 0.9
        assert result.method is DetectionMethod.AUTO

    @pytest.mark.parametrize("k", [5, 12, 40, 54])
    def test_spike_anywhere_in_interior(self, k: int) -> None:
        frames = frames_from_wrist_path(spike_path(60, k))
        assert detect_impact(frames, 60.0).impact_frame == k

    def test_confidence_scales_with_deceleration(self) -> None:
        frames = frames_from_wrist_path(_two_speed_path(40, 20, before=30.0, after=10.0))
        result = detect_impact(frames, 120.0)
        assert result.impact_frame == 20
        assert result.confidence == pytest.approx(0.4)

    def test_confidence_caps_at_one(self) -> None:
        frames = frames_from_wrist_path(spike_path(60, 30, jump=400.0))
        assert detect_impact(frames, 60.0).confidence == 1.0

    def test_first_of_equal_drops_wins(self) -> None:
        xs = [0.0 if i < 20 else 100.0 if i < 40 else 200.0 for i in range(60)]
        assert detect_impact(frames_from_wrist_path(xs), 60.0).impact_frame == 20

    def test_slow_wrists_fall_back_to_midpoint(self) -> None:
        frames = frames_from_wrist_path(steady_path(41, step=1.0))
        result = detect_impact(frames, 60.0)
        assert result.impact_frame == 20
        assert result.confidence == 0.0
        assert result.method is DetectionMethod.AUTO

    def test_incoming_speed_must_exceed_floor(self) -> None:
        frames = frames_from_wrist_path(_two_speed_path(40, 20, before=10.0, after=0.0))
        assert detect_impact(frames, 60.0).confidence == 0.0

    def test_spike_inside_edge_margin_is_ignored(self) -> None:
        frames = frames_from_wrist_path(spike_path(60, 2))
        result = detect_impact(frames, 60.0)
        assert result.impact_frame == 30
        assert result.confidence == 0.0

    def test_short_sequence_falls_back(self) -> None:
        frames = frames_from_wrist_path(spike_path(8, 4))
        result = detect_impact(frames, 60.0)
        assert result.impact_frame == 4
        assert result.confidence == 0.0

    def test_custom_speed_floor(self) -> None:
        frames = frames_from_wrist_path(_two_speed_path(40, 20, before=8.0, after=0.0))
        result = detect_impact(frames, 60.0, config=ImpactConfig(min_wrist_speed=5.0))
        assert result.impact_frame == 20
        assert result.confidence == pytest.approx(8.0 / 50.0)

    def test_fallback_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        frames = frames_from_wrist_path(steady_path(20))
        with caplog.at_level("INFO", logger="barrels_engine.video.impact"):
            detect_impact(frames, 60.0)
        assert "defaulting impact to frame 10" in caplog.text

    def test_empty_frames_raise(self) -> None:
        with pytest.raises(InvalidInputError, match="No pose frames"):
            detect_impact([], 60.0)

    def test_non_positive_fps_raises(self) -> None:
        with pytest.raises(InvalidInputError, match="fps must be positive"):
            detect_impact(frames_from_wrist_path(steady_path(20)), 0.0)

    def test_missing_wrists_raise(self) -> None:
        frames = [JointFrame(frame=0, timestamp=0.0, keypoints=tuple(Keypoint(0.0, 0.0) for _ in range(11)))]
        with pytest.raises(InvalidInputError, match="missing wrist joints"):
            detect_impact(frames, 60.0)


class TestManualImpact:
    def test_manual_frame_is_trusted(self) -> None:
        result = manual_impact(12, 30)
        assert result.impact_frame == 12
        assert result.confidence == 1.0
        assert result.method is DetectionMethod.MANUAL

    @pytest.mark.parametrize("frame", [-1, 30])
    def test_out_of_range_frame_raises(self, frame: int) -> None:
        with pytest.raises(InvalidInputError):
            manual_impact(frame, 30)
