from dataclasses import dataclass
from enum import StrEnum

from barrels_engine.exceptions import InvalidInputError


class PlayerLevel(StrEnum):
    MLB = "mlb"
    COLLEGE = "college"
    HS = "hs"
    YOUTH = "youth"


_LEVEL_ALIASES: dict[str, PlayerLevel] = {
    "pro": PlayerLevel.MLB,
    "high_school": PlayerLevel.HS,
    "highschool": PlayerLevel.HS,
}


def parse_level(raw: str | PlayerLevel) -> PlayerLevel:
    """Resolve a level name (case-insensitive, with aliases) to a PlayerLevel."""
    if isinstance(raw, PlayerLevel):
        return raw
    key = raw.strip().lower()
    if key in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[key]
    try:
        return PlayerLevel(key)
    except ValueError:
        raise InvalidInputError(f"Unknown player level '{raw}'") from None


class BallResult(StrEnum):
    FAIR = "fair"
    FOUL = "foul"
    MISS = "miss"
    TAKE = "take"


@dataclass(frozen=True)
class BattedBallEvent:
    result: BallResult
    exit_velocity: float | None = None
    launch_angle: float | None = None
    distance: float | None = None
    in_zone: bool | None = None
    player_level: PlayerLevel | None = None

    @property
    def is_fair(self) -> bool:
        return self.result is BallResult.FAIR

    @property
    def is_swing(self) -> bool:
        return self.result is not BallResult.TAKE


@dataclass(frozen=True)
class AngleWindow:
    min_angle: float
    max_angle: float

    def contains(self, angle: float) -> bool:
        return self.min_angle <= angle <= self.max_angle


@dataclass(frozen=True)
class WindowStep:
    below_ev: float  # exclusive upper bound on the table's exit-velocity scale
    window: AngleWindow


STATCAST_TABLE_FLOOR = 98.0

# Statcast barrel windows, keyed on MLB exit velocity from the 98 mph floor
STATCAST_WINDOW_STEPS: tuple[WindowStep, ...] = (
    WindowStep(99.0, AngleWindow(26.0, 30.0)),
    WindowStep(100.0, AngleWindow(25.0, 31.0)),
    WindowStep(101.0, AngleWindow(24.0, 33.0)),
    WindowStep(103.0, AngleWindow(23.0, 35.0)),
    WindowStep(105.0, AngleWindow(22.0, 37.0)),
    WindowStep(107.0, AngleWindow(21.0, 39.0)),
    WindowStep(109.0, AngleWindow(20.0, 41.0)),
    WindowStep(111.0, AngleWindow(19.0, 43.0)),
    WindowStep(113.0, AngleWindow(18.0, 45.0)),
    WindowStep(115.0, AngleWindow(16.0, 48.0)),
)
STATCAST_TOP_WINDOW = AngleWindow(8.0, 50.0)

# MLB reads the same steps on its own scale from a 95 mph floor, with the
# lower edge held at 20 degrees until the Statcast curve drops below it
MLB_WINDOW_STEPS: tuple[WindowStep, ...] = (
    WindowStep(99.0, AngleWindow(20.0, 30.0)),
    WindowStep(100.0, AngleWindow(20.0, 31.0)),
    WindowStep(101.0, AngleWindow(20.0, 33.0)),
    WindowStep(103.0, AngleWindow(20.0, 35.0)),
    WindowStep(105.0, AngleWindow(20.0, 37.0)),
    WindowStep(107.0, AngleWindow(20.0, 39.0)),
    WindowStep(109.0, AngleWindow(20.0, 41.0)),
    WindowStep(111.0, AngleWindow(19.0, 43.0)),
    WindowStep(113.0, AngleWindow(18.0, 45.0)),
    WindowStep(115.0, AngleWindow(16.0, 48.0)),
)


@dataclass(frozen=True)
class BarrelProfile:
    """Level-specific barrel thresholds.

    Exit velocity at or above ``ev_min`` is shifted onto the window table's
    scale so that ``ev_min`` lands on ``table_floor``. A level with a 92 mph
    floor therefore reads a 92 mph ball as a 98 mph MLB ball. The window is
    the first step whose bound the shifted velocity is under, otherwise
    ``top_window``.
    """

    ev_min: float
    steps: tuple[WindowStep, ...] = STATCAST_WINDOW_STEPS
    top_window: AngleWindow = STATCAST_TOP_WINDOW
    table_floor: float = STATCAST_TABLE_FLOOR

    def table_velocity(self, exit_velocity: float) -> float:
        return exit_velocity - (self.ev_min - self.table_floor)

    def window_for(self, exit_velocity: float) -> AngleWindow | None:
        if exit_velocity < self.ev_min:
            return None
        scaled = self.table_velocity(exit_velocity)
        for step in self.steps:
            if scaled < step.below_ev:
                return step.window
        return self.top_window


DEFAULT_BARREL_PROFILES: dict[PlayerLevel, BarrelProfile] = {
    PlayerLevel.MLB: BarrelProfile(ev_min=95.0, steps=MLB_WINDOW_STEPS, table_floor=95.0),
    PlayerLevel.COLLEGE: BarrelProfile(ev_min=92.0),
    PlayerLevel.HS: BarrelProfile(ev_min=92.0),
    PlayerLevel.YOUTH: BarrelProfile(ev_min=85.0),
}


@dataclass(frozen=True)
class BarrelResult:
    is_barrel: bool
    exit_velocity: float | None
    launch_angle: float | None
    level: PlayerLevel
    angle_window: AngleWindow | None
    ev_min: float
