import json
from pathlib import Path
from typing import Annotated

import typer

from barrels_engine.barrels.metrics import compute_on_the_ball_metrics
from barrels_engine.cli._logging import configure_logging
from barrels_engine.cli._output import (
    console,
    print_coach_report,
    print_error,
    print_impact,
    print_leaks,
    print_on_the_ball,
    print_prepared,
    print_timing,
    print_warning,
)
from barrels_engine.config import ConfigFileError, EngineConfig, load_engine_config
from barrels_engine.domain.pose import JointFrame
from barrels_engine.domain.result import Err, Ok
from barrels_engine.domain.timing import TimingInput
from barrels_engine.exceptions import InvalidInputError
from barrels_engine.ingest.batted_balls import load_batted_balls
from barrels_engine.ingest.pose_json import frames_to_json, load_pose_frames
from barrels_engine.scoring.analysis import LOW_IMPACT_CONFIDENCE
from barrels_engine.scoring.coaching import generate_momentum_coaching, generate_structured_coach_report
from barrels_engine.scoring.flow import goaty_label, identify_leaks
from barrels_engine.timing.calculator import calculate_machine_speed, time_pitch, validate_timing_input
from barrels_engine.video.impact import detect_impact
from barrels_engine.video.normalize import prepare_swing

app = typer.Typer(name="barrels", help="Swing scoring — impact detection, timing, contact quality and flow leaks")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Swing scoring — impact detection, timing, contact quality and flow leaks."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_PoseFileArg = Annotated[Path, typer.Argument(help="Pose sequence JSON file")]
_FpsOpt = Annotated[float, typer.Option("--fps", help="Frame rate the pose sequence was captured at")]
_ConfigDirOpt = Annotated[Path | None, typer.Option("--config-dir", help="Directory containing barrels.toml")]


def _load_config(config_dir: Path | None) -> EngineConfig:
    try:
        return load_engine_config(config_dir)
    except ConfigFileError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from None


def _load_frames(path: Path) -> list[JointFrame]:
    match load_pose_frames(path):
        case Ok(frames):
            return frames
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command()
def impact(pose_file: _PoseFileArg, fps: _FpsOpt, config_dir: _ConfigDirOpt = None) -> None:
    """Detect the bat-ball contact frame from wrist deceleration."""
    config = _load_config(config_dir)
    frames = _load_frames(pose_file)
    try:
        result = detect_impact(frames, fps, config=config.impact)
    except InvalidInputError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from None
    print_impact(result, len(frames))


@app.command()
def prepare(
    pose_file: _PoseFileArg,
    fps: _FpsOpt,
    impact_frame: Annotated[int | None, typer.Option("--impact-frame", help="Coach-marked contact frame")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write normalized frames as JSON")] = None,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Trim a pose sequence around impact and resample it to the canonical frame rate."""
    config = _load_config(config_dir)
    frames = _load_frames(pose_file)
    try:
        prepared = prepare_swing(
            frames,
            fps,
            manual_impact_frame=impact_frame,
            impact_config=config.impact,
            config=config.normalize,
        )
    except InvalidInputError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from None

    print_prepared(prepared)
    if prepared.impact.confidence < LOW_IMPACT_CONFIDENCE:
        print_warning(f"Low impact-detection confidence ({prepared.impact.confidence:.2f}); try --impact-frame")
    if output is not None:
        output.write_text(json.dumps(frames_to_json(prepared.frames)), encoding="utf-8")
        console.print(f"  Wrote {output}")


@app.command()
def timing(
    distance: Annotated[float, typer.Option("--distance", help="Machine distance from the plate (ft)")],
    speed: Annotated[float, typer.Option("--speed", help="Machine speed (mph)")],
    fps: Annotated[float, typer.Option("--fps", help="Video frame rate")],
    release: Annotated[int | None, typer.Option("--release", help="Ball release frame")] = None,
    launch: Annotated[int | None, typer.Option("--launch", help="Hitter launch frame")] = None,
    contact: Annotated[int | None, typer.Option("--contact", help="Contact frame")] = None,
    pitch: Annotated[int | None, typer.Option("--pitch", help="Pitch number")] = None,
) -> None:
    """Reaction-time metrics for one pitch of a machine timing assessment."""
    record = TimingInput(
        machine_distance_ft=distance,
        machine_speed_mph=speed,
        video_fps=fps,
        frame_release=release,
        frame_launch=launch,
        frame_contact=contact,
        pitch_number=pitch,
    )
    validation = validate_timing_input(record)
    if not validation.valid:
        for message in validation.errors:
            print_error(message)
        raise typer.Exit(code=1)
    print_timing(time_pitch(record))


@app.command("machine-speed")
def machine_speed(
    game_speed: Annotated[float, typer.Argument(help="Game pitch speed to simulate (mph)")],
    distance: Annotated[float, typer.Option("--distance", help="Machine distance from the plate (ft)")],
) -> None:
    """Machine speed giving the same reaction time as a game pitch from the mound."""
    console.print(f"{calculate_machine_speed(game_speed, distance):g} mph at {distance:g} ft")


@app.command("on-the-ball")
def on_the_ball(
    csv_file: Annotated[Path, typer.Argument(help="Launch-monitor CSV export")],
    level: Annotated[str | None, typer.Option("--level", help="Player level (mlb, college, hs, youth)")] = None,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Contact-quality metrics for a batch of batted balls."""
    config = _load_config(config_dir)
    match load_batted_balls(csv_file, level, default_level=config.default_level):
        case Ok(batch):
            print_on_the_ball(compute_on_the_ball_metrics(batch.events, batch.level, profiles=config.barrel_profiles))
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command()
def leaks(
    overall: Annotated[float, typer.Argument(help="Momentum-transfer score (0-100)")],
    ground_flow: Annotated[float, typer.Argument(help="Ground flow sub-score")],
    power_flow: Annotated[float, typer.Argument(help="Power flow sub-score")],
    barrel_flow: Annotated[float, typer.Argument(help="Barrel flow sub-score")],
    band: Annotated[int | None, typer.Option("--band", help="GOATY band (-3 to 3)")] = None,
    coach_report: Annotated[bool, typer.Option("--report", help="Also print the structured coach report")] = False,
    config_dir: _ConfigDirOpt = None,
) -> None:
    """Identify energy leaks from momentum-transfer sub-scores."""
    config = _load_config(config_dir)
    for name, value in (
        ("overall", overall),
        ("ground flow", ground_flow),
        ("power flow", power_flow),
        ("barrel flow", barrel_flow),
    ):
        if not 0 <= value <= 100:
            print_error(f"{name} score must be within [0, 100], got {value:g}")
            raise typer.Exit(code=1)
    try:
        label = goaty_label(band) if band is not None else None
    except InvalidInputError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from None

    report = identify_leaks(ground_flow, power_flow, barrel_flow, overall, threshold=config.leak_threshold)
    coaching = generate_momentum_coaching(
        overall, ground_flow, power_flow, barrel_flow, leak_threshold=config.leak_threshold
    )
    print_leaks(report, overall, coaching, label)
    if coach_report:
        print_coach_report(
            generate_structured_coach_report(
                overall, ground_flow, power_flow, barrel_flow, leak_threshold=config.leak_threshold
            )
        )
