"""Level-adjusted barrel classification.

A barrel is a fair ball hit hard enough, at a launch angle inside a window
that opens up as exit velocity climbs. Windows come from the Statcast step
table; lower levels have a lower exit-velocity floor and read the table as if
their floor were the MLB one.
"""

from collections.abc import Mapping, Sequence

from barrels_engine.domain.batted_ball import (
    DEFAULT_BARREL_PROFILES,
    AngleWindow,
    BarrelProfile,
    BarrelResult,
    BattedBallEvent,
    PlayerLevel,
    parse_level,
)

DEFAULT_LEVEL = PlayerLevel.HS


def _profile_for(level: PlayerLevel, profiles: Mapping[PlayerLevel, BarrelProfile] | None) -> BarrelProfile:
    return (profiles or DEFAULT_BARREL_PROFILES)[level]


def ev_min_for_level(
    level: str | PlayerLevel,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> float:
    return _profile_for(parse_level(level), profiles).ev_min


def angle_window_for_ev(
    exit_velocity: float,
    level: str | PlayerLevel,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> AngleWindow | None:
    """Launch-angle window for ``exit_velocity`` at ``level``, or None below the floor."""
    return _profile_for(parse_level(level), profiles).window_for(exit_velocity)


def compute_is_barrel(
    exit_velocity: float | None,
    launch_angle: float | None,
    is_fair: bool,
    level: str | PlayerLevel = DEFAULT_LEVEL,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> BarrelResult:
    resolved = parse_level(level)
    ev_min = _profile_for(resolved, profiles).ev_min

    window: AngleWindow | None = None
    if is_fair and exit_velocity is not None:
        window = angle_window_for_ev(exit_velocity, resolved, profiles=profiles)

    is_barrel = window is not None and launch_angle is not None and window.contains(launch_angle)
    return BarrelResult(
        is_barrel=is_barrel,
        exit_velocity=exit_velocity,
        launch_angle=launch_angle,
        level=resolved,
        angle_window=window,
        ev_min=ev_min,
    )


def classify_event(
    event: BattedBallEvent,
    default_level: str | PlayerLevel = DEFAULT_LEVEL,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> BarrelResult:
    level = event.player_level if event.player_level is not None else default_level
    return compute_is_barrel(event.exit_velocity, event.launch_angle, event.is_fair, level, profiles=profiles)


def compute_barrels_for_events(
    events: Sequence[BattedBallEvent],
    default_level: str | PlayerLevel = DEFAULT_LEVEL,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> list[BarrelResult]:
    return [classify_event(e, default_level, profiles=profiles) for e in events]
