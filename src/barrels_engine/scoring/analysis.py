"""Assemble the momentum-transfer analysis for one swing.

Sub-scores come from an external scoring model (anything satisfying
``SwingScorer``); this module turns them into severities, leak flags, the
GOATY label and coaching text.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from barrels_engine.domain.flow import (
    FLOW_PATH_LABELS,
    LEGACY_LABELS,
    AnalysisFlags,
    AnalysisOutput,
    AthleteInfo,
    FlowPath,
    LegacyZone,
    MomentumTransferScore,
    SubScore,
    SwingScores,
    SwingTiming,
)
from barrels_engine.domain.pose import JointFrame
from barrels_engine.scoring.coaching import generate_momentum_coaching, generate_structured_coach_report
from barrels_engine.scoring.flow import (
    LEAK_GAP_THRESHOLD,
    calculate_leak_severity,
    goaty_label,
    identify_leaks,
    to_legacy_zone,
)
from barrels_engine.video.impact import ImpactConfig
from barrels_engine.video.normalize import NormalizeConfig, PreparedSwing, prepare_swing

logger = logging.getLogger(__name__)

LOW_IMPACT_CONFIDENCE = 0.5


class SwingScorer(Protocol):
    def score(self, frames: Sequence[JointFrame], fps: float) -> SwingScores: ...


@dataclass(frozen=True)
class SwingAnalysis:
    prepared: PreparedSwing
    output: AnalysisOutput


def format_analysis_output(
    video_id: str,
    athlete: AthleteInfo,
    scores: SwingScores,
    timing: SwingTiming | None = None,
    *,
    sequence_broken: bool = False,
    leak_threshold: float = LEAK_GAP_THRESHOLD,
    warnings: Sequence[str] = (),
) -> AnalysisOutput:
    overall = scores.momentum_transfer
    path_scores = {
        FlowPath.GROUND_FLOW: scores.ground_flow,
        FlowPath.POWER_FLOW: scores.power_flow,
        FlowPath.BARREL_FLOW: scores.barrel_flow,
    }
    sub_scores = {
        path: SubScore(score=value, label=FLOW_PATH_LABELS[path], leak_severity=calculate_leak_severity(value, overall))
        for path, value in path_scores.items()
    }
    legacy_sub_scores: dict[LegacyZone, SubScore] = {}
    for path, sub in sub_scores.items():
        zone = to_legacy_zone(path)
        legacy_sub_scores[zone] = SubScore(score=sub.score, label=LEGACY_LABELS[zone], leak_severity=sub.leak_severity)

    leaks = identify_leaks(scores.ground_flow, scores.power_flow, scores.barrel_flow, overall, threshold=leak_threshold)
    flags = AnalysisFlags(
        main_leak=leaks.main_leak,
        secondary_leak=leaks.secondary_leak,
        sequence_broken=sequence_broken,
        main_leak_legacy=to_legacy_zone(leaks.main_leak),
        secondary_leak_legacy=to_legacy_zone(leaks.secondary_leak) if leaks.secondary_leak is not None else None,
    )
    coaching = generate_momentum_coaching(
        overall, scores.ground_flow, scores.power_flow, scores.barrel_flow, leak_threshold=leak_threshold
    )
    coach_report = generate_structured_coach_report(
        overall, scores.ground_flow, scores.power_flow, scores.barrel_flow, leak_threshold=leak_threshold
    )
    return AnalysisOutput(
        video_id=video_id,
        athlete=athlete,
        momentum_transfer=MomentumTransferScore(
            score=overall,
            goaty_band=scores.goaty_band,
            goaty_label=goaty_label(scores.goaty_band),
            confidence=scores.confidence,
        ),
        sub_scores=sub_scores,
        legacy_sub_scores=legacy_sub_scores,
        timing=timing,
        flags=flags,
        coach_summary=coaching,
        coach_report=coach_report,
        warnings=tuple(warnings),
    )


def analyze_swing(
    video_id: str,
    athlete: AthleteInfo,
    frames: Sequence[JointFrame],
    fps: float,
    scorer: SwingScorer,
    *,
    manual_impact_frame: int | None = None,
    timing: SwingTiming | None = None,
    sequence_broken: bool = False,
    impact_config: ImpactConfig | None = None,
    normalize_config: NormalizeConfig | None = None,
    leak_threshold: float = LEAK_GAP_THRESHOLD,
) -> SwingAnalysis:
    """Prepare a raw pose sequence, score it with ``scorer``, and format the result."""
    prepared = prepare_swing(
        frames,
        fps,
        manual_impact_frame=manual_impact_frame,
        impact_config=impact_config,
        config=normalize_config,
    )
    warnings: list[str] = []
    if prepared.impact.confidence < LOW_IMPACT_CONFIDENCE:
        warnings.append(
            f"Low impact-detection confidence ({prepared.impact.confidence:.2f}); "
            f"consider marking the contact frame manually"
        )

    scores = scorer.score(prepared.frames, prepared.target_fps)
    logger.info(
        "Scored %s: momentum transfer %.1f, band %d",
        video_id,
        scores.momentum_transfer,
        scores.goaty_band,
    )
    output = format_analysis_output(
        video_id,
        athlete,
        scores,
        timing,
        sequence_broken=sequence_broken,
        leak_threshold=leak_threshold,
        warnings=warnings,
    )
    return SwingAnalysis(prepared=prepared, output=output)
