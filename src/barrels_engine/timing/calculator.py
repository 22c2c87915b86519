"""Reaction-time metrics for pitch-machine timing assessments.

A pitch is marked up with three video frames: ball release, the hitter's
launch (hip commit) and contact. Combined with the machine distance and
speed these give how long the ball takes to reach the plate, how long the
hitter took to decide, how much time was left over (buffer), and how long
the swing itself took.
"""

from barrels_engine.domain.timing import TimedPitch, TimingInput, TimingMetrics, TimingValidation
from barrels_engine.exceptions import InvalidInputError

MPH_TO_FEET_PER_SECOND = 1.467  # 5280 / 3600
REGULATION_PITCH_DISTANCE_FT = 60.5

MIN_DISTANCE_FT, MAX_DISTANCE_FT = 20.0, 60.0
MIN_SPEED_MPH, MAX_SPEED_MPH = 20.0, 100.0
MIN_FPS, MAX_FPS = 30.0, 300.0

# Game-equivalent speed (mph) -> machine speed (mph) at a given distance
MACHINE_SPEED_LOOKUP_30FT: dict[int, float] = {90: 44.6, 80: 39.7, 70: 34.7}
MACHINE_SPEED_LOOKUP_35FT: dict[int, float] = {90: 52.1, 80: 46.3, 70: 40.5}


def calculate_time_to_plate(distance_ft: float, speed_mph: float) -> float:
    """Milliseconds for a ball at ``speed_mph`` to cover ``distance_ft``."""
    if speed_mph <= 0:
        raise InvalidInputError(f"Pitch speed must be positive, got {speed_mph}")
    return distance_ft / (speed_mph * MPH_TO_FEET_PER_SECOND) * 1000


def _frames_to_ms(start: int | None, end: int | None, fps: float) -> float | None:
    if fps <= 0:
        raise InvalidInputError(f"fps must be positive, got {fps}")
    if start is None or end is None:
        return None
    return (end - start) / fps * 1000


def _round(value: float | None) -> float | None:
    return round(value, 2) if value is not None else None


def calculate_timing_metrics(pitch: TimingInput) -> TimingMetrics:
    """Compute timing metrics for one pitch.

    Decision time needs release and launch frames, swing time needs launch and
    contact frames, and buffer needs decision time. A negative buffer means the
    hitter committed after the ball would have reached the plate.
    """
    time_to_plate = calculate_time_to_plate(pitch.machine_distance_ft, pitch.machine_speed_mph)
    decision = _frames_to_ms(pitch.frame_release, pitch.frame_launch, pitch.video_fps)
    buffer = time_to_plate - decision if decision is not None else None
    swing = _frames_to_ms(pitch.frame_launch, pitch.frame_contact, pitch.video_fps)
    return TimingMetrics(
        time_to_plate_ms=round(time_to_plate, 2),
        decision_time_ms=_round(decision),
        buffer_ms=_round(buffer),
        swing_time_ms=_round(swing),
    )


def time_pitch(pitch: TimingInput) -> TimedPitch:
    return TimedPitch(pitch=pitch, metrics=calculate_timing_metrics(pitch))


def validate_timing_input(pitch: TimingInput) -> TimingValidation:
    errors: list[str] = []

    if not pitch.machine_distance_ft or not MIN_DISTANCE_FT <= pitch.machine_distance_ft <= MAX_DISTANCE_FT:
        errors.append("Machine distance must be between 20-60 feet")
    if not pitch.machine_speed_mph or not MIN_SPEED_MPH <= pitch.machine_speed_mph <= MAX_SPEED_MPH:
        errors.append("Machine speed must be between 20-100 mph")
    if not pitch.video_fps or not MIN_FPS <= pitch.video_fps <= MAX_FPS:
        errors.append("Video FPS must be between 30-300")

    if pitch.frame_release is not None and pitch.frame_launch is not None:
        if pitch.frame_launch <= pitch.frame_release:
            errors.append("Launch frame must be after release frame")
    if pitch.frame_launch is not None and pitch.frame_contact is not None:
        if pitch.frame_contact <= pitch.frame_launch:
            errors.append("Contact frame must be after launch frame")
    if pitch.frame_release is not None and pitch.frame_contact is not None and pitch.frame_launch is None:
        if pitch.frame_contact <= pitch.frame_release:
            errors.append("Contact frame must be after release frame")

    return TimingValidation(errors=tuple(errors))


def calculate_machine_speed(
    game_speed_mph: float,
    machine_distance_ft: float,
    game_distance_ft: float = REGULATION_PITCH_DISTANCE_FT,
) -> float:
    """Machine speed that gives the same reaction time as ``game_speed_mph`` from the mound."""
    if game_distance_ft <= 0:
        raise InvalidInputError(f"Game distance must be positive, got {game_distance_ft}")
    return round(game_speed_mph * (machine_distance_ft / game_distance_ft), 1)
