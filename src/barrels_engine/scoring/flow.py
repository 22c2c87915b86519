from barrels_engine.domain.flow import (
    FLOW_PATH_TO_LEGACY,
    FlowGap,
    FlowPath,
    GoatyLabel,
    LeakReport,
    LeakSeverity,
    LegacyZone,
)
from barrels_engine.exceptions import InvalidInputError

LEAK_GAP_THRESHOLD = 10.0

# Upper bounds (exclusive) on overall - sub-score for each severity
_SEVERITY_BANDS: tuple[tuple[float, LeakSeverity], ...] = (
    (5.0, LeakSeverity.NONE),
    (10.0, LeakSeverity.MILD),
    (15.0, LeakSeverity.MODERATE),
)

GOATY_LABELS: dict[int, GoatyLabel] = {
    3: GoatyLabel.ELITE,
    2: GoatyLabel.ADVANCED,
    1: GoatyLabel.ABOVE_AVERAGE,
    0: GoatyLabel.AVERAGE,
    -1: GoatyLabel.BELOW_AVERAGE,
    -2: GoatyLabel.POOR,
    -3: GoatyLabel.NEEDS_WORK,
}


def calculate_leak_severity(sub_score: float, overall_score: float) -> LeakSeverity:
    gap = overall_score - sub_score
    for upper, severity in _SEVERITY_BANDS:
        if gap < upper:
            return severity
    return LeakSeverity.SEVERE


def identify_leaks(
    ground_flow: float,
    power_flow: float,
    barrel_flow: float,
    overall_score: float,
    *,
    threshold: float = LEAK_GAP_THRESHOLD,
) -> LeakReport:
    """Find the flow paths that trail the overall score the most.

    Paths are ranked by ``overall - score``; equal gaps keep ground, power,
    barrel order. The main leak is reported only when its gap reaches
    ``threshold``, and likewise the secondary leak.
    """
    gaps = [
        FlowGap(FlowPath.GROUND_FLOW, ground_flow, overall_score - ground_flow),
        FlowGap(FlowPath.POWER_FLOW, power_flow, overall_score - power_flow),
        FlowGap(FlowPath.BARREL_FLOW, barrel_flow, overall_score - barrel_flow),
    ]
    ranked = sorted(gaps, key=lambda g: g.gap, reverse=True)

    main = ranked[0].path if ranked[0].gap >= threshold else FlowPath.NONE
    secondary = ranked[1].path if ranked[1].gap >= threshold else None
    return LeakReport(main_leak=main, secondary_leak=secondary, gaps=tuple(ranked))


def goaty_label(band: int) -> GoatyLabel:
    try:
        return GOATY_LABELS[band]
    except KeyError:
        raise InvalidInputError(f"GOATY band must be between -3 and 3, got {band}") from None


def to_legacy_zone(path: FlowPath) -> LegacyZone:
    return FLOW_PATH_TO_LEGACY[path]


def sub_score_interpretation(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Strong"
    if score >= 70:
        return "Solid"
    if score >= 60:
        return "Fair"
    return "Needs Work"
