"""Plain-language coaching lines for a momentum-transfer result.

``generate_momentum_coaching`` keeps the athlete-facing text to three short
parts: what the overall score means, where the energy leaks, and a single feel
cue to work on next. ``generate_structured_coach_report`` builds the longer
report a coach reads, with strengths, opportunities and coach-only notes.
"""

from barrels_engine.domain.flow import (
    FLOW_PATH_LABELS,
    CoachingSummary,
    CoachNotes,
    FlowGap,
    FlowPath,
    LeakReport,
    StructuredCoachReport,
)
from barrels_engine.scoring.flow import LEAK_GAP_THRESHOLD, identify_leaks

_OVERALL_BANDS: tuple[tuple[float, str], ...] = (
    (92, "Momentum transfer is elite ({score:g}). You sequence like a pro and let the barrel do the work."),
    (85, "Momentum transfer is advanced ({score:g}). The pattern is solid; what's left are small efficiency gains."),
    (75, "Timing pattern is above average ({score:g}). You create flow and have a leak or two to clean up."),
    (60, "You're creating speed ({score:g}) but losing some of it as energy moves up through the body."),
)
_OVERALL_FLOOR = "The swing reads as effort more than flow right now ({score:g}); energy isn't moving cleanly yet."

_LEAK_LINES: dict[FlowPath, tuple[str, str]] = {
    FlowPath.GROUND_FLOW: (
        "Ground flow is inconsistent: the lower body isn't loading and holding long enough to start the hips cleanly.",
        "Next step: load into the ground and hold it so the hips can fire on time.",
    ),
    FlowPath.POWER_FLOW: (
        "Power flow leaks: the torso isn't accepting what the hips started, so the swing dumps early or spins flat.",
        "Next step: let the hips start and the torso follow instead of turning everything together.",
    ),
    FlowPath.BARREL_FLOW: (
        "Barrel flow is mistimed: the hands and bat aren't catching the energy coming from the core.",
        "Next step: let the barrel release late so it catches the energy rather than forcing it.",
    ),
}
_BALANCED = (
    "Energy moves evenly through ground flow, power flow and barrel flow.",
    "Next step: build consistency and let the pattern settle in with reps.",
)

_HEADER_BANDS: tuple[tuple[float, str], ...] = (
    (92, "Energy moves through the body like a clean whip. This is big-league sequencing."),
    (85, "The timing pattern is strong, with small leaks left to clean up."),
    (75, "You create speed but leak energy between body segments."),
    (60, "There's effort in the swing, but energy isn't traveling cleanly through the body yet."),
)
_HEADER_FLOOR = "Energy isn't flowing smoothly yet. Build the pattern from the ground up."


def _overall_line(score: float) -> str:
    for floor, template in _OVERALL_BANDS:
        if score >= floor:
            return template.format(score=score)
    return _OVERALL_FLOOR.format(score=score)


def generate_momentum_coaching(
    overall_score: float,
    ground_flow: float,
    power_flow: float,
    barrel_flow: float,
    *,
    leak_threshold: float = LEAK_GAP_THRESHOLD,
) -> CoachingSummary:
    leaks = identify_leaks(ground_flow, power_flow, barrel_flow, overall_score, threshold=leak_threshold)
    leak_line, next_step = _LEAK_LINES.get(leaks.main_leak, _BALANCED)
    return CoachingSummary(overall_line=_overall_line(overall_score), leak_line=leak_line, next_step=next_step)


def momentum_header_text(score: float) -> str:
    for floor, text in _HEADER_BANDS:
        if score >= floor:
            return text
    return _HEADER_FLOOR


# Structured coach report

STRONG_PATH_SCORE = 80.0
STEADY_PATH_GAP = 5.0

_PATHS = (FlowPath.GROUND_FLOW, FlowPath.POWER_FLOW, FlowPath.BARREL_FLOW)

_OVERVIEW_BANDS: tuple[tuple[float, str], ...] = (
    (
        92,
        "A momentum-transfer score of {score:g} is elite. Energy moves through the body efficiently and in "
        "sequence, and the barrel is doing the work instead of being forced.",
    ),
    (
        85,
        "A momentum-transfer score of {score:g} is an advanced pattern. Flow runs consistently from the ground "
        "to the barrel; what's left is refining small inefficiencies to find more bat speed.",
    ),
    (
        75,
        "A momentum-transfer score of {score:g} shows good flow with some energy left on the table. One or two "
        "segments aren't accepting energy cleanly, and small adjustments will pay off.",
    ),
    (
        60,
        "A momentum-transfer score of {score:g} shows speed being generated, but energy isn't moving smoothly "
        "through the body. The effort is there; the sequencing breaks down somewhere along the way.",
    ),
)
_OVERVIEW_FLOOR = (
    "A momentum-transfer score of {score:g} means the energy flow isn't connected yet, so the swing reads as "
    "effort rather than flow. That's common, and the pattern can be built step by step from the ground up."
)

_LEAK_DETAIL: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: (
        "The lower body isn't loading and holding long enough to set up a clean hip start, so the swing "
        "starts early or never loads into the ground."
    ),
    FlowPath.POWER_FLOW: (
        "The torso isn't accepting what the hips started. The barrel gets dumped early or the torso spins "
        "flat instead of tilting to the pitch plane."
    ),
    FlowPath.BARREL_FLOW: (
        "The hands and bat aren't catching the energy coming from the core, so the barrel drags or gets "
        "forced instead of releasing late off the body's turn."
    ),
}

_STRENGTH_LINES: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: "Ground flow is strong: you load into the ground and hold it well.",
    FlowPath.POWER_FLOW: "Power flow is strong: the hips and torso create good separation and turn.",
    FlowPath.BARREL_FLOW: "Barrel flow is strong: the hands and bat catch the energy cleanly.",
}

_OPPORTUNITY_LINES: dict[FlowPath, tuple[str, str]] = {
    FlowPath.GROUND_FLOW: (
        "Load into the ground and hold it longer; it sets up everything else in the swing.",
        "Delay the hip fire until the lower body has fully loaded.",
    ),
    FlowPath.POWER_FLOW: (
        "Let the hips start the swing and the torso follow instead of turning everything together.",
        "Build separation between hips and shoulders during the load.",
    ),
    FlowPath.BARREL_FLOW: (
        "Let the barrel release late, as a reaction to the body's turn rather than something forced.",
        "Keep the hands inside and the path to the ball short.",
    ),
}
_BALANCED_OPPORTUNITIES = (
    "Build consistency so the balanced pattern holds up rep after rep.",
    "Test the pattern against higher velocity and different pitch types.",
)
_FOLLOW_UP_LINES: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: "Once the main leak is fixed, revisit the ground connection and weight shift.",
    FlowPath.POWER_FLOW: "Once the main leak is fixed, refine core rotation and separation.",
    FlowPath.BARREL_FLOW: "Once the main leak is fixed, fine-tune barrel path and hand timing.",
}
_TRACK_PROGRESS = "Track swing metrics over time to measure progress and spot trends."

_SESSION_FOCUS: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: (
        "Next session: load-and-hold work. Pause at full load, feel the pressure in the back hip, then fire. "
        "The feel to chase is the hips starting the swing, not the hands."
    ),
    FlowPath.POWER_FLOW: (
        "Next session: separation work. Let the hips open while the chest stays closed a beat longer, "
        "then let the torso follow. The feel to chase is a stretch across the core."
    ),
    FlowPath.BARREL_FLOW: (
        "Next session: barrel-lag work. Keep the hands inside and let the bat whip through late off the "
        "body's turn. The feel to chase is the barrel arriving on its own."
    ),
}
_BALANCED_FOCUS = (
    "Next session: keep the pattern and challenge it. Mix speeds and locations and keep the same feel of "
    "energy moving from the ground to the barrel."
)

_BREAKDOWN_HINTS: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: "an early hip start or a short load",
    FlowPath.POWER_FLOW: "flat rotation or an early torso commit",
    FlowPath.BARREL_FLOW: "an early bat commit or a dragging barrel",
}
_STARTER_DRILLS: dict[FlowPath, str] = {
    FlowPath.GROUND_FLOW: "load-and-hold drills",
    FlowPath.POWER_FLOW: "hip-lead separation drills",
    FlowPath.BARREL_FLOW: "barrel-lag drills",
}


def _overview(score: float) -> str:
    for floor, template in _OVERVIEW_BANDS:
        if score >= floor:
            return template.format(score=score)
    return _OVERVIEW_FLOOR.format(score=score)


def _gap_for(report: LeakReport, path: FlowPath) -> FlowGap:
    return next(gap for gap in report.gaps if gap.path is path)


def _named(gap: FlowGap) -> str:
    return f"{FLOW_PATH_LABELS[gap.path]} ({gap.score:g})"


def _detail(report: LeakReport) -> str:
    if not report.has_leak:
        scores = ", ".join(_named(_gap_for(report, path)) for path in _PATHS)
        return (
            f"{scores} are balanced. There's no major leak: energy moves cleanly through each segment, "
            "so the work now is polishing the pattern and building confidence in the timing."
        )
    main = _gap_for(report, report.main_leak)
    if report.secondary_leak is not None:
        secondary = _gap_for(report, report.secondary_leak)
        return (
            f"Two leaks show up: {_named(main)} and {_named(secondary)}. Segments are firing early or not "
            "accepting energy from the link before them. Fixing the main leak first often lets the second "
            "one fall into place."
        )
    return (
        f"The main leak is {_named(main)}. {_LEAK_DETAIL[main.path]} "
        "Fix this link and the rest of the pattern tightens up."
    )


def _strengths(overall: float, report: LeakReport) -> tuple[str, ...]:
    if overall >= 85:
        first = "Overall sequencing is advanced: energy flows from the ground up with minimal waste."
    elif overall >= 75:
        first = "You create good flow through most of the swing and the pattern is taking shape."
    else:
        first = "You're generating speed, and the raw ingredients of a good swing are there."

    scores = {gap.path: gap.score for gap in report.gaps}
    strong = next(
        (path for path in _PATHS if scores[path] >= STRONG_PATH_SCORE and path is not report.main_leak), None
    )
    if strong is not None:
        second = _STRENGTH_LINES[strong]
    else:
        steady = [gap.path for gap in report.gaps if gap.gap < STEADY_PATH_GAP]
        if steady:
            second = f"{FLOW_PATH_LABELS[steady[-1]]} is consistent and a reliable part of your pattern."
        else:
            second = "The physical tools are there; the work is connecting timing and sequencing."

    if report.has_leak:
        third = "There's one clear thing to fix, which makes progress easier to see."
    else:
        third = "No major leak shows up, so the pattern is balanced across all three flow paths."
    return (first, second, third)


def _opportunities(report: LeakReport) -> tuple[str, ...]:
    if not report.has_leak:
        return (*_BALANCED_OPPORTUNITIES, _TRACK_PROGRESS)
    first, second = _OPPORTUNITY_LINES[report.main_leak]
    if report.secondary_leak is not None:
        return (first, second, _FOLLOW_UP_LINES[report.secondary_leak])
    return (first, second, _TRACK_PROGRESS)


def _coach_notes(overall: float, report: LeakReport) -> CoachNotes:
    if not report.has_leak:
        scores = ", ".join(f"{FLOW_PATH_LABELS[path].lower()} {_gap_for(report, path).score:g}" for path in _PATHS)
        return CoachNotes(
            technical_observations=(
                f"All flow paths balanced ({scores}). The pattern is clean; challenge it with mixed pitch "
                "types and velocities."
            ),
            progression=(
                "Pattern is solid. Progress to mixed-timing drills, higher velocity or game-like work, and "
                "track exit-velocity trends."
            ),
            watch_points=(
                "Watch for regression under pressure such as high velocity or game situations. If the pattern "
                "holds, move on to advanced timing and pitch-recognition work."
            ),
        )

    main = _gap_for(report, report.main_leak)
    label = FLOW_PATH_LABELS[main.path]
    technical = f"Primary leak: {label} ({main.score:g} against {overall:g} overall)."
    if report.secondary_leak is not None:
        secondary = _gap_for(report, report.secondary_leak)
        technical += f" Secondary leak: {FLOW_PATH_LABELS[secondary.path]} ({secondary.score:g})."
        next_phase = f"targeted work on {FLOW_PATH_LABELS[secondary.path]}"
    else:
        technical += " Other paths balanced."
        next_phase = "live BP with feel cues"
    technical += f" Sequencing points to {_BREAKDOWN_HINTS[main.path]}."

    watch = (
        f"Monitor {label} over the next 2-3 sessions. Without a 5-point gain, review video to check the cue "
        "is being executed."
    )
    if report.secondary_leak is not None:
        watch += (
            f" Also watch {FLOW_PATH_LABELS[report.secondary_leak]}: if it improves without direct work, "
            "the main leak was the root cause."
        )
    return CoachNotes(
        technical_observations=technical,
        progression=(
            f"Start with {_STARTER_DRILLS[main.path]}, then move to {next_phase}. "
            "Aim for 50-75 quality swings per session."
        ),
        watch_points=watch,
    )


def generate_structured_coach_report(
    overall_score: float,
    ground_flow: float,
    power_flow: float,
    barrel_flow: float,
    *,
    leak_threshold: float = LEAK_GAP_THRESHOLD,
) -> StructuredCoachReport:
    """Build the coach-facing report for one swing.

    Strengths always name a positive, opportunities are led by the main leak
    when there is one, and the coach notes are not meant for the athlete.
    """
    leaks = identify_leaks(ground_flow, power_flow, barrel_flow, overall_score, threshold=leak_threshold)
    return StructuredCoachReport(
        overview=_overview(overall_score),
        detail=_detail(leaks),
        strengths=_strengths(overall_score, leaks),
        opportunities=_opportunities(leaks),
        next_session_focus=_SESSION_FOCUS.get(leaks.main_leak, _BALANCED_FOCUS),
        coach_notes=_coach_notes(overall_score, leaks),
    )
