from dataclasses import dataclass, field


@dataclass(frozen=True)
class TimingInput:
    """One pitch of a reaction-time assessment, as marked up on video."""

    machine_distance_ft: float
    machine_speed_mph: float
    video_fps: float
    frame_release: int | None = None
    frame_launch: int | None = None
    frame_contact: int | None = None
    pitch_number: int | None = None


@dataclass(frozen=True)
class TimingMetrics:
    time_to_plate_ms: float
    decision_time_ms: float | None = None
    buffer_ms: float | None = None
    swing_time_ms: float | None = None

    @property
    def committed_late(self) -> bool:
        return self.buffer_ms is not None and self.buffer_ms < 0


@dataclass(frozen=True)
class TimedPitch:
    """A pitch record paired with the metrics derived from exactly these inputs."""

    pitch: TimingInput
    metrics: TimingMetrics


@dataclass(frozen=True)
class TimingValidation:
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors
