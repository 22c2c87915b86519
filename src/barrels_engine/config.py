import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from barrels_engine.barrels.classifier import DEFAULT_LEVEL
from barrels_engine.domain.batted_ball import (
    DEFAULT_BARREL_PROFILES,
    AngleWindow,
    BarrelProfile,
    PlayerLevel,
    WindowStep,
    parse_level,
)
from barrels_engine.domain.errors import ConfigError
from barrels_engine.exceptions import BarrelsException, InvalidInputError
from barrels_engine.scoring.flow import LEAK_GAP_THRESHOLD
from barrels_engine.video.impact import ImpactConfig
from barrels_engine.video.normalize import NormalizeConfig

_CONFIG_FILENAME = "barrels.toml"
DEFAULT_LEVEL_ENV_VAR = "BARRELS_DEFAULT_LEVEL"

_SECTION_KEYS: dict[str, frozenset[str]] = {
    "impact": frozenset({"edge_frames", "min_wrist_speed", "confidence_scale"}),
    "normalize": frozenset({"target_fps", "trim_seconds"}),
    "leaks": frozenset({"leak_threshold"}),
    "barrels": frozenset({"default_level", "levels"}),
}
_PROFILE_KEYS = frozenset({"ev_min", "table_floor", "steps", "top_window"})


class ConfigFileError(BarrelsException):
    """Raised when barrels.toml is unreadable or holds invalid settings."""

    def __init__(self, error: ConfigError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class EngineConfig:
    impact: ImpactConfig = field(default_factory=ImpactConfig)
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    leak_threshold: float = LEAK_GAP_THRESHOLD
    default_level: PlayerLevel = DEFAULT_LEVEL
    barrel_profiles: Mapping[PlayerLevel, BarrelProfile] = field(default_factory=lambda: dict(DEFAULT_BARREL_PROFILES))


# -- Parsing -----------------------------------------------------------------


def _fail(message: str, unrecognized: tuple[str, ...] = ()) -> ConfigFileError:
    return ConfigFileError(ConfigError(message=message, unrecognized_keys=unrecognized))


def _check_keys(raw: Mapping[str, Any], allowed: frozenset[str], context: str) -> None:
    unknown = tuple(sorted(k for k in raw if k not in allowed))
    if unknown:
        raise _fail(f"{context}: unrecognized keys {', '.join(unknown)}", unknown)


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name, {})
    if not isinstance(raw, dict):
        raise _fail(f"[{name}] must be a table")
    _check_keys(raw, _SECTION_KEYS[name], f"[{name}]")
    return raw


def _positive_number(raw: Mapping[str, Any], key: str, default: float, context: str) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise _fail(f"{context}: '{key}' must be a positive number, got {value!r}")
    return float(value)


def _non_negative_int(raw: Mapping[str, Any], key: str, default: int, context: str) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _fail(f"{context}: '{key}' must be a non-negative integer, got {value!r}")
    return value


def _parse_window(value: Any, context: str) -> AngleWindow:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value)
    ):
        raise _fail(f"{context}: expected [min, max] angles, got {value!r}")
    low, high = float(value[0]), float(value[1])
    if low > high:
        raise _fail(f"{context}: min angle {low} is above max angle {high}")
    return AngleWindow(low, high)


def _parse_steps(value: Any, context: str) -> tuple[WindowStep, ...]:
    if not isinstance(value, list) or not value:
        raise _fail(f"{context}: expected a non-empty list of [below_ev, min, max] steps")
    steps: list[WindowStep] = []
    for i, raw in enumerate(value):
        if not isinstance(raw, list) or len(raw) != 3:
            raise _fail(f"{context}[{i}]: expected [below_ev, min, max], got {raw!r}")
        bound = raw[0]
        if isinstance(bound, bool) or not isinstance(bound, (int, float)):
            raise _fail(f"{context}[{i}]: expected [below_ev, min, max], got {raw!r}")
        if steps and bound <= steps[-1].below_ev:
            raise _fail(f"{context}[{i}]: step bounds must increase, {bound} follows {steps[-1].below_ev}")
        steps.append(WindowStep(float(bound), _parse_window(raw[1:], f"{context}[{i}]")))
    return tuple(steps)


def parse_barrel_profile(raw: Mapping[str, Any], base: BarrelProfile, context: str) -> BarrelProfile:
    """Overlay the keys present in ``raw`` onto ``base``."""
    _check_keys(raw, _PROFILE_KEYS, context)
    return BarrelProfile(
        ev_min=_positive_number(raw, "ev_min", base.ev_min, context),
        steps=_parse_steps(raw["steps"], f"{context} steps") if "steps" in raw else base.steps,
        top_window=(
            _parse_window(raw["top_window"], f"{context} top_window") if "top_window" in raw else base.top_window
        ),
        table_floor=_positive_number(raw, "table_floor", base.table_floor, context),
    )


def _parse_level(raw: Any, context: str) -> PlayerLevel:
    if not isinstance(raw, str):
        raise _fail(f"{context}: level must be a string, got {raw!r}")
    try:
        return parse_level(raw)
    except InvalidInputError as exc:
        raise _fail(f"{context}: {exc}") from None


def parse_engine_config(data: Mapping[str, Any]) -> EngineConfig:
    _check_keys(data, frozenset(_SECTION_KEYS), _CONFIG_FILENAME)

    impact_raw = _section(data, "impact")
    impact = ImpactConfig(
        edge_frames=_non_negative_int(impact_raw, "edge_frames", ImpactConfig.edge_frames, "[impact]"),
        min_wrist_speed=_positive_number(impact_raw, "min_wrist_speed", ImpactConfig.min_wrist_speed, "[impact]"),
        confidence_scale=_positive_number(impact_raw, "confidence_scale", ImpactConfig.confidence_scale, "[impact]"),
    )

    normalize_raw = _section(data, "normalize")
    normalize = NormalizeConfig(
        target_fps=_positive_number(normalize_raw, "target_fps", NormalizeConfig.target_fps, "[normalize]"),
        trim_seconds=_positive_number(normalize_raw, "trim_seconds", NormalizeConfig.trim_seconds, "[normalize]"),
    )

    leaks_raw = _section(data, "leaks")
    leak_threshold = _positive_number(leaks_raw, "leak_threshold", LEAK_GAP_THRESHOLD, "[leaks]")

    barrels_raw = _section(data, "barrels")
    default_level = _parse_level(barrels_raw.get("default_level", str(DEFAULT_LEVEL)), "[barrels] default_level")
    profiles = dict(DEFAULT_BARREL_PROFILES)
    levels_raw = barrels_raw.get("levels", {})
    if not isinstance(levels_raw, dict):
        raise _fail("[barrels.levels] must be a table")
    for name, raw_profile in levels_raw.items():
        context = f"[barrels.levels.{name}]"
        level = _parse_level(name, context)
        if not isinstance(raw_profile, dict):
            raise _fail(f"{context} must be a table")
        profiles[level] = parse_barrel_profile(raw_profile, profiles[level], context)

    return EngineConfig(
        impact=impact,
        normalize=normalize,
        leak_threshold=leak_threshold,
        default_level=default_level,
        barrel_profiles=profiles,
    )


# -- TOML loading ------------------------------------------------------------


def load_engine_config(config_dir: Path | None = None, env: Mapping[str, str] | None = None) -> EngineConfig:
    """Load ``barrels.toml`` from ``config_dir`` (defaults when absent).

    ``BARRELS_DEFAULT_LEVEL`` in the environment overrides the file's default level.
    """
    if env is None:
        env = os.environ
    data: dict[str, Any] = {}
    if config_dir is not None:
        toml_path = config_dir / _CONFIG_FILENAME
        if toml_path.exists():
            try:
                with toml_path.open("rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise _fail(f"{toml_path}: {exc}") from exc

    config = parse_engine_config(data)
    override = env.get(DEFAULT_LEVEL_ENV_VAR)
    if override:
        config = replace(config, default_level=_parse_level(override, DEFAULT_LEVEL_ENV_VAR))
    return config
