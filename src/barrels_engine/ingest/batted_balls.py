"""Launch-monitor CSV rows -> BattedBallEvent.

Exports from HitTrax and similar tools name the same measurement several
ways, so each field is looked up through a list of known column aliases.
"""

import csv
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from barrels_engine.barrels.classifier import DEFAULT_LEVEL
from barrels_engine.domain.batted_ball import BallResult, BattedBallEvent, PlayerLevel, parse_level
from barrels_engine.domain.errors import IngestError
from barrels_engine.domain.result import Err, Ok, Result
from barrels_engine.exceptions import InvalidInputError
from barrels_engine.ingest.csv_source import CsvSource

logger = logging.getLogger(__name__)

EXIT_VELOCITY_COLUMNS = ("Exit Velocity", "ExitVelo", "Exit_Velocity", "EV", "exit_velocity", "Velo")
LAUNCH_ANGLE_COLUMNS = ("Launch Angle", "LaunchAngle", "Launch_Angle", "LA", "launch_angle")
DISTANCE_COLUMNS = ("Distance", "Dist", "distance")
RESULT_COLUMNS = ("Res", "Result", "result")
STRIKE_ZONE_COLUMNS = ("Strike Zone", "StrikeZone", "strike_zone")
IN_ZONE_COLUMNS = ("In Zone", "InZone", "in_zone")
LEVEL_COLUMNS = ("Level", "level")

# HitTrax numbers the 3x3 strike zone 4-12; other cells are outside it
IN_ZONE_CELLS = frozenset(range(4, 13))

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0"})


@dataclass(frozen=True)
class BattedBallBatch:
    events: list[BattedBallEvent]
    level: PlayerLevel
    source_detail: str


def _lookup(row: Mapping[str, Any], columns: Sequence[str]) -> str | None:
    for column in columns:
        value = row.get(column)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def _to_optional_float(value: str | None, field: str) -> float | None:
    if value is None:
        return None
    try:
        parsed = float(value)
    except ValueError:
        raise InvalidInputError(f"{field} '{value}' is not a number") from None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def _to_optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise InvalidInputError(f"In-zone flag '{value}' is not a boolean")


def _parse_result(raw: str | None, has_contact: bool) -> BallResult:
    text = (raw or "").lower()
    if "foul" in text:
        return BallResult.FOUL
    if "take" in text:
        return BallResult.TAKE
    if "miss" in text or "whiff" in text:
        return BallResult.MISS
    return BallResult.FAIR if has_contact else BallResult.MISS


def _parse_in_zone(row: Mapping[str, Any]) -> bool | None:
    flag = _to_optional_bool(_lookup(row, IN_ZONE_COLUMNS))
    if flag is not None:
        return flag
    zone = _lookup(row, STRIKE_ZONE_COLUMNS)
    if zone is None:
        return None
    try:
        return int(float(zone)) in IN_ZONE_CELLS
    except ValueError:
        raise InvalidInputError(f"Strike zone '{zone}' is not a number") from None


def batted_ball_from_row(row: Mapping[str, Any]) -> BattedBallEvent:
    """Map one export row to an event; zero or blank exit velocity means no contact."""
    velo = _to_optional_float(_lookup(row, EXIT_VELOCITY_COLUMNS), "Exit velocity")
    exit_velocity = velo if velo is not None and velo > 0 else None
    launch_angle = _to_optional_float(_lookup(row, LAUNCH_ANGLE_COLUMNS), "Launch angle")
    distance = _to_optional_float(_lookup(row, DISTANCE_COLUMNS), "Distance")
    raw_level = _lookup(row, LEVEL_COLUMNS)

    return BattedBallEvent(
        result=_parse_result(_lookup(row, RESULT_COLUMNS), exit_velocity is not None),
        exit_velocity=exit_velocity,
        launch_angle=launch_angle if exit_velocity is not None else None,
        distance=distance if distance is not None and distance > 0 else None,
        in_zone=_parse_in_zone(row),
        player_level=parse_level(raw_level) if raw_level is not None else None,
    )


def infer_level(rows: Sequence[Mapping[str, Any]], default: str | PlayerLevel = DEFAULT_LEVEL) -> PlayerLevel:
    """Batch level from the first row's Level column, else ``default``."""
    if rows:
        raw = _lookup(rows[0], LEVEL_COLUMNS)
        if raw is not None:
            return parse_level(raw)
    return parse_level(default)


def load_batted_balls(
    path: str | Path,
    level: str | PlayerLevel | None = None,
    *,
    default_level: str | PlayerLevel = DEFAULT_LEVEL,
) -> Result[BattedBallBatch, IngestError]:
    """Read a launch-monitor CSV into a batch of events.

    An explicit ``level`` wins over the file's Level column, which wins over
    ``default_level``.
    """
    source = CsvSource(path)
    logger.info("Loading batted-ball events from %s", source.source_detail)

    def _error(message: str, row_number: int | None = None) -> Err[IngestError]:
        logger.error("Batted-ball import failed for %s: %s", source.source_detail, message)
        return Err(
            IngestError(
                message=message,
                source_type=source.source_type,
                source_detail=source.source_detail,
                row_number=row_number,
            )
        )

    try:
        rows = source.fetch()
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        return _error(str(exc))
    if not rows:
        return _error("CSV file is empty")

    events: list[BattedBallEvent] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            events.append(batted_ball_from_row(row))
        except InvalidInputError as exc:
            return _error(f"Row {row_number}: {exc}", row_number)

    try:
        batch_level = parse_level(level) if level is not None else infer_level(rows, default_level)
    except InvalidInputError as exc:
        return _error(str(exc))

    logger.debug("Parsed %d batted-ball events at level %s", len(events), batch_level)
    return Ok(BattedBallBatch(events=events, level=batch_level, source_detail=source.source_detail))
