from dataclasses import dataclass

from barrels_engine.domain.batted_ball import PlayerLevel


@dataclass(frozen=True)
class OnTheBallMetrics:
    level: PlayerLevel
    total_events: int
    swings: int
    fair_balls: int
    fouls: int
    misses: int
    takes: int
    barrels: int
    hard_hits: int
    in_zone_events: int
    in_zone_fair: int
    # Rates over fair balls; None when there are no fair balls
    barrel_rate: float | None = None
    hard_hit_rate: float | None = None
    avg_ev: float | None = None
    avg_la: float | None = None
    sd_ev: float | None = None
    sd_la: float | None = None
    # Same statistics restricted to in-zone fair balls
    inzone_barrel_rate: float | None = None
    inzone_avg_ev: float | None = None
    inzone_avg_la: float | None = None
    inzone_sd_ev: float | None = None
    inzone_sd_la: float | None = None
    # Outcome mix over swings (takes excluded); None when there are no swings
    fair_pct: float | None = None
    foul_pct: float | None = None
    miss_pct: float | None = None
