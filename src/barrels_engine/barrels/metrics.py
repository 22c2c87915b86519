import logging
import statistics
from collections.abc import Mapping, Sequence

from barrels_engine.barrels.classifier import DEFAULT_LEVEL, classify_event
from barrels_engine.domain.batted_ball import BallResult, BarrelProfile, BattedBallEvent, PlayerLevel, parse_level
from barrels_engine.domain.on_the_ball import OnTheBallMetrics

logger = logging.getLogger(__name__)


def _mean(values: list[float]) -> float | None:
    return statistics.fmean(values) if values else None


def _pstdev(values: list[float]) -> float | None:
    # Population SD: a session is the whole population, not a sample of one
    return statistics.pstdev(values) if values else None


def _rate(numerator: int, denominator: int) -> float | None:
    return numerator / denominator if denominator > 0 else None


def _velocities(events: Sequence[BattedBallEvent]) -> list[float]:
    return [e.exit_velocity for e in events if e.exit_velocity is not None]


def _angles(events: Sequence[BattedBallEvent]) -> list[float]:
    return [e.launch_angle for e in events if e.launch_angle is not None]


def compute_on_the_ball_metrics(
    events: Sequence[BattedBallEvent],
    level: str | PlayerLevel = DEFAULT_LEVEL,
    *,
    profiles: Mapping[PlayerLevel, BarrelProfile] | None = None,
) -> OnTheBallMetrics:
    """Reduce a batch of batted-ball events to contact-quality metrics.

    Exit-velocity and launch-angle statistics and barrel / hard-hit rates are
    taken over fair balls only. ``fair_pct``, ``foul_pct`` and ``miss_pct``
    are fractions of swings and sum to 1; takes count toward
    ``total_events`` but not toward swings. Any statistic without data is
    None rather than zero.
    """
    resolved = parse_level(level)
    fair = [e for e in events if e.result is BallResult.FAIR]
    fouls = sum(1 for e in events if e.result is BallResult.FOUL)
    misses = sum(1 for e in events if e.result is BallResult.MISS)
    takes = sum(1 for e in events if e.result is BallResult.TAKE)
    swings = len(events) - takes
    in_zone_events = sum(1 for e in events if e.in_zone is True)
    in_zone_fair = [e for e in fair if e.in_zone is True]

    results = [classify_event(e, resolved, profiles=profiles) for e in fair]
    barrel_flags = [r.is_barrel for r in results]
    hard_flags = [r.exit_velocity is not None and r.exit_velocity >= r.ev_min for r in results]
    barrels = sum(barrel_flags)
    hard_hits = sum(hard_flags)
    inzone_barrels = sum(flag for e, flag in zip(fair, barrel_flags, strict=True) if e.in_zone is True)

    fair_ev, fair_la = _velocities(fair), _angles(fair)
    zone_ev, zone_la = _velocities(in_zone_fair), _angles(in_zone_fair)

    metrics = OnTheBallMetrics(
        level=resolved,
        total_events=len(events),
        swings=swings,
        fair_balls=len(fair),
        fouls=fouls,
        misses=misses,
        takes=takes,
        barrels=barrels,
        hard_hits=hard_hits,
        in_zone_events=in_zone_events,
        in_zone_fair=len(in_zone_fair),
        barrel_rate=_rate(barrels, len(fair)),
        hard_hit_rate=_rate(hard_hits, len(fair)),
        avg_ev=_mean(fair_ev),
        avg_la=_mean(fair_la),
        sd_ev=_pstdev(fair_ev),
        sd_la=_pstdev(fair_la),
        inzone_barrel_rate=_rate(inzone_barrels, len(in_zone_fair)),
        inzone_avg_ev=_mean(zone_ev),
        inzone_avg_la=_mean(zone_la),
        inzone_sd_ev=_pstdev(zone_ev),
        inzone_sd_la=_pstdev(zone_la),
        fair_pct=_rate(len(fair), swings),
        foul_pct=_rate(fouls, swings),
        miss_pct=_rate(misses, swings),
    )
    logger.debug(
        "On-the-ball metrics for %d events (%s): %d fair, %d barrels",
        len(events),
        resolved,
        len(fair),
        barrels,
    )
    return metrics
