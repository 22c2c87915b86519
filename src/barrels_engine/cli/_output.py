from rich.console import Console
from rich.markup import escape
from rich.table import Table

from barrels_engine.domain.flow import (
    FLOW_PATH_LABELS,
    CoachingSummary,
    FlowPath,
    GoatyLabel,
    LeakReport,
    StructuredCoachReport,
)
from barrels_engine.domain.impact import ImpactDetectionResult
from barrels_engine.domain.on_the_ball import OnTheBallMetrics
from barrels_engine.domain.timing import TimedPitch
from barrels_engine.scoring.flow import calculate_leak_severity
from barrels_engine.video.normalize import PreparedSwing

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _fmt(value: float | None, fmt: str = ".1f") -> str:
    return format(value, fmt) if value is not None else "—"


def _pct(value: float | None) -> str:
    return f"{value * 100:.1f}%" if value is not None else "—"


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {escape(message)}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow bold]Warning:[/yellow bold] {escape(message)}")


def print_impact(result: ImpactDetectionResult, frame_count: int) -> None:
    console.print(f"[bold green]Impact[/bold green] at frame [bold]{result.impact_frame}[/bold] of {frame_count}")
    console.print(f"  Method: {result.method}")
    console.print(f"  Confidence: {result.confidence:.2f}")


def print_prepared(prepared: PreparedSwing) -> None:
    trim = prepared.trim_range
    impact = prepared.impact
    console.print(
        f"[bold green]Prepared[/bold green] swing: {len(prepared.frames)} frames at {prepared.target_fps:g} fps"
    )
    console.print(f"  Impact: frame {impact.impact_frame} ({impact.method}, confidence {impact.confidence:.2f})")
    console.print(f"  Kept source frames: {trim.start_frame}-{trim.end_frame}")
    console.print(f"  Normalized impact frame: {prepared.normalized_impact_frame}")


def print_timing(timed: TimedPitch) -> None:
    metrics = timed.metrics
    label = f"Pitch {timed.pitch.pitch_number}" if timed.pitch.pitch_number is not None else "Pitch"
    console.print(
        f"[bold]{label}[/bold]: {timed.pitch.machine_speed_mph:g} mph from {timed.pitch.machine_distance_ft:g} ft"
    )
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Metric")
    table.add_column("ms", justify="right")
    table.add_row("Time to plate", _fmt(metrics.time_to_plate_ms, ".2f"))
    table.add_row("Decision time", _fmt(metrics.decision_time_ms, ".2f"))
    table.add_row("Buffer", _fmt(metrics.buffer_ms, ".2f"))
    table.add_row("Swing time", _fmt(metrics.swing_time_ms, ".2f"))
    console.print(table)
    if metrics.committed_late:
        console.print("  [red]Committed after the ball reached the plate[/red]")


def print_on_the_ball(metrics: OnTheBallMetrics) -> None:
    console.print(
        f"[bold]On-the-ball[/bold] ({metrics.level}): {metrics.total_events} events, "
        f"{metrics.swings} swings, {metrics.fair_balls} fair"
    )
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Stat")
    table.add_column("All", justify="right")
    table.add_column("In zone", justify="right")
    table.add_row("Barrel rate", _pct(metrics.barrel_rate), _pct(metrics.inzone_barrel_rate))
    table.add_row("Hard-hit rate", _pct(metrics.hard_hit_rate), "—")
    table.add_row("Avg EV", _fmt(metrics.avg_ev), _fmt(metrics.inzone_avg_ev))
    table.add_row("SD EV", _fmt(metrics.sd_ev), _fmt(metrics.inzone_sd_ev))
    table.add_row("Avg LA", _fmt(metrics.avg_la), _fmt(metrics.inzone_avg_la))
    table.add_row("SD LA", _fmt(metrics.sd_la), _fmt(metrics.inzone_sd_la))
    console.print(table)
    console.print(
        f"  Fair {_pct(metrics.fair_pct)}  Foul {_pct(metrics.foul_pct)}  Miss {_pct(metrics.miss_pct)}"
    )


def print_leaks(
    report: LeakReport,
    overall: float,
    coaching: CoachingSummary,
    label: GoatyLabel | None = None,
) -> None:
    header = f"[bold]Momentum transfer[/bold] {overall:g}"
    if label is not None:
        header += f" ({label})"
    console.print(header)

    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Flow path")
    table.add_column("Score", justify="right")
    table.add_column("Gap", justify="right")
    table.add_column("Severity")
    for gap in report.gaps:
        table.add_row(
            FLOW_PATH_LABELS[gap.path],
            f"{gap.score:g}",
            f"{gap.gap:+g}",
            str(calculate_leak_severity(gap.score, overall)),
        )
    console.print(table)

    if report.main_leak is FlowPath.NONE:
        console.print("  Main leak: none")
    else:
        console.print(f"  Main leak: [red]{FLOW_PATH_LABELS[report.main_leak]}[/red]")
    if report.secondary_leak is not None:
        console.print(f"  Secondary leak: {FLOW_PATH_LABELS[report.secondary_leak]}")
    console.print()
    console.print(coaching.full_text)


def print_coach_report(report: StructuredCoachReport) -> None:
    console.print()
    console.print("[bold]Coach report[/bold]")
    console.print(report.overview)
    console.print(report.detail)
    console.print()
    console.print("[bold]Strengths[/bold]")
    for line in report.strengths:
        console.print(f"  • {line}")
    console.print("[bold]Opportunities[/bold]")
    for line in report.opportunities:
        console.print(f"  • {line}")
    console.print()
    console.print(report.next_session_focus)
    console.print()
    console.print("[bold]Coach notes[/bold]")
    console.print(f"  Technical: {report.coach_notes.technical_observations}")
    console.print(f"  Progression: {report.coach_notes.progression}")
    console.print(f"  Watch: {report.coach_notes.watch_points}")
