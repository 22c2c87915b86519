from dataclasses import dataclass, field
from enum import StrEnum

from barrels_engine.exceptions import InvalidInputError


class FlowPath(StrEnum):
    GROUND_FLOW = "ground_flow"
    POWER_FLOW = "power_flow"
    BARREL_FLOW = "barrel_flow"
    NONE = "none"


class LegacyZone(StrEnum):
    ANCHOR = "anchor"
    ENGINE = "engine"
    WHIP = "whip"
    NONE = "none"


FLOW_PATH_TO_LEGACY: dict[FlowPath, LegacyZone] = {
    FlowPath.GROUND_FLOW: LegacyZone.ANCHOR,
    FlowPath.POWER_FLOW: LegacyZone.ENGINE,
    FlowPath.BARREL_FLOW: LegacyZone.WHIP,
    FlowPath.NONE: LegacyZone.NONE,
}

FLOW_PATH_LABELS: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: "Ground Flow",
    FlowPath.POWER_FLOW: "Power Flow",
    FlowPath.BARREL_FLOW: "Barrel Flow",
}

LEGACY_LABELS: dict[LegacyZone, str] = {
    LegacyZone.ANCHOR: "Ground → Hips",
    LegacyZone.ENGINE: "Hips → Torso",
    LegacyZone.WHIP: "Torso → Barrel",
}


class LeakSeverity(StrEnum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class GoatyLabel(StrEnum):
    ELITE = "Elite"
    ADVANCED = "Advanced"
    ABOVE_AVERAGE = "Above Average"
    AVERAGE = "Average"
    BELOW_AVERAGE = "Below Average"
    POOR = "Poor"
    NEEDS_WORK = "Needs Work"


class Handedness(StrEnum):
    RIGHT = "R"
    LEFT = "L"
    SWITCH = "S"


def _check_score(name: str, value: float) -> None:
    if not 0.0 <= value <= 100.0:
        raise InvalidInputError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class SubScore:
    score: float
    label: str
    leak_severity: LeakSeverity


@dataclass(frozen=True)
class FlowGap:
    path: FlowPath
    score: float
    gap: float


@dataclass(frozen=True)
class LeakReport:
    main_leak: FlowPath
    secondary_leak: FlowPath | None
    gaps: tuple[FlowGap, ...] = ()

    @property
    def has_leak(self) -> bool:
        return self.main_leak is not FlowPath.NONE


@dataclass(frozen=True)
class SwingScores:
    """Output of the external sub-score model for one swing."""

    momentum_transfer: float
    ground_flow: float
    power_flow: float
    barrel_flow: float
    goaty_band: int
    confidence: float = 0.85

    def __post_init__(self) -> None:
        _check_score("momentum_transfer", self.momentum_transfer)
        _check_score("ground_flow", self.ground_flow)
        _check_score("power_flow", self.power_flow)
        _check_score("barrel_flow", self.barrel_flow)
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidInputError(f"confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True)
class SegmentGaps:
    pelvis_to_torso_ms: float
    torso_to_hands_ms: float
    hands_to_bat_ms: float


@dataclass(frozen=True)
class SwingTiming:
    ab_ratio: float
    load_duration_ms: float
    swing_duration_ms: float
    sequence_order: tuple[str, ...]
    segment_gaps: SegmentGaps


@dataclass(frozen=True)
class AthleteInfo:
    name: str
    level: str
    age: int
    bats: Handedness
    throws: Handedness


@dataclass(frozen=True)
class MomentumTransferScore:
    score: float
    goaty_band: int
    goaty_label: GoatyLabel
    confidence: float


@dataclass(frozen=True)
class AnalysisFlags:
    main_leak: FlowPath
    secondary_leak: FlowPath | None
    sequence_broken: bool
    main_leak_legacy: LegacyZone
    secondary_leak_legacy: LegacyZone | None


@dataclass(frozen=True)
class CoachingSummary:
    overall_line: str
    leak_line: str
    next_step: str

    @property
    def full_text(self) -> str:
        return f"{self.overall_line} {self.leak_line} {self.next_step}"


@dataclass(frozen=True)
class CoachNotes:
    """Coach-only notes, not shown to the athlete."""

    technical_observations: str
    progression: str
    watch_points: str


@dataclass(frozen=True)
class StructuredCoachReport:
    overview: str
    detail: str
    strengths: tuple[str, ...]
    opportunities: tuple[str, ...]
    next_session_focus: str
    coach_notes: CoachNotes

    @property
    def full_text(self) -> str:
        return f"{self.overview} {self.detail} {self.next_session_focus}"


@dataclass(frozen=True)
class AnalysisOutput:
    video_id: str
    athlete: AthleteInfo
    momentum_transfer: MomentumTransferScore
    sub_scores: dict[FlowPath, SubScore]
    legacy_sub_scores: dict[LegacyZone, SubScore]
    timing: SwingTiming | None
    flags: AnalysisFlags
    coach_summary: CoachingSummary
    coach_report: StructuredCoachReport
    warnings: tuple[str, ...] = field(default_factory=tuple)
