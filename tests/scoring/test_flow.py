import pytest

from barrels_engine.domain.flow import FlowPath, GoatyLabel, LeakSeverity, LegacyZone
from barrels_engine.exceptions import InvalidInputError
from barrels_engine.scoring.flow import (
    calculate_leak_severity,
    goaty_label,
    identify_leaks,
    sub_score_interpretation,
    to_legacy_zone,
)


class TestCalculateLeakSeverity:
    @pytest.mark.parametrize(
        ("sub_score", "expected"),
        [
            (80.0, LeakSeverity.NONE),
            (95.0, LeakSeverity.NONE),
            (75.1, LeakSeverity.NONE),
            (75.0, LeakSeverity.MILD),
            (70.1, LeakSeverity.MILD),
            (70.0, LeakSeverity.MODERATE),
            (65.1, LeakSeverity.MODERATE),
            (65.0, LeakSeverity.SEVERE),
            (20.0, LeakSeverity.SEVERE),
        ],
    )
    def test_bands_against_overall_of_eighty(self, sub_score: float, expected: LeakSeverity) -> None:
        assert calculate_leak_severity(sub_score, 80.0) is expected


class TestIdentifyLeaks:
    def test_no_gaps(self) -> None:
        report = identify_leaks(80, 80, 80, 80)
        assert report.main_leak is FlowPath.NONE
        assert report.secondary_leak is None
        assert report.has_leak is False

    def test_single_large_gap(self) -> None:
        report = identify_leaks(50, 90, 90, 90)
        assert report.main_leak is FlowPath.GROUND_FLOW
        assert report.secondary_leak is None
        assert report.gaps[0].gap == 40

    def test_main_and_secondary(self) -> None:
        report = identify_leaks(75, 60, 85, 80)
        assert report.main_leak is FlowPath.POWER_FLOW
        assert report.secondary_leak is None
        report = identify_leaks(65, 60, 85, 80)
        assert report.main_leak is FlowPath.POWER_FLOW
        assert report.secondary_leak is FlowPath.GROUND_FLOW

    def test_threshold_is_inclusive(self) -> None:
        assert identify_leaks(70, 80, 80, 80).main_leak is FlowPath.GROUND_FLOW
        assert identify_leaks(70.1, 80, 80, 80).main_leak is FlowPath.NONE

    def test_custom_threshold(self) -> None:
        report = identify_leaks(75, 80, 80, 80, threshold=5.0)
        assert report.main_leak is FlowPath.GROUND_FLOW

    def test_ties_keep_flow_order(self) -> None:
        report = identify_leaks(80, 60, 60, 90)
        assert report.main_leak is FlowPath.POWER_FLOW
        assert report.secondary_leak is FlowPath.BARREL_FLOW

    def test_gaps_ranked_largest_first(self) -> None:
        report = identify_leaks(70, 85, 50, 80)
        assert [g.path for g in report.gaps] == [FlowPath.BARREL_FLOW, FlowPath.GROUND_FLOW, FlowPath.POWER_FLOW]
        assert [g.gap for g in report.gaps] == [30, 10, -5]

    def test_sub_scores_above_overall_are_not_leaks(self) -> None:
        report = identify_leaks(95, 95, 95, 80)
        assert report.main_leak is FlowPath.NONE


class TestGoatyLabel:
    @pytest.mark.parametrize(
        ("band", "label"),
        [
            (3, GoatyLabel.ELITE),
            (2, GoatyLabel.ADVANCED),
            (1, GoatyLabel.ABOVE_AVERAGE),
            (0, GoatyLabel.AVERAGE),
            (-1, GoatyLabel.BELOW_AVERAGE),
            (-2, GoatyLabel.POOR),
            (-3, GoatyLabel.NEEDS_WORK),
        ],
    )
    def test_labels(self, band: int, label: GoatyLabel) -> None:
        assert goaty_label(band) is label

    def test_label_text(self) -> None:
        assert str(goaty_label(1)) == "Above Average"

    @pytest.mark.parametrize("band", [4, -4])
    def test_out_of_range_raises(self, band: int) -> None:
        with pytest.raises(InvalidInputError, match="between -3 and 3"):
            goaty_label(band)


class TestLegacyZones:
    def test_mapping(self) -> None:
        assert to_legacy_zone(FlowPath.GROUND_FLOW) is LegacyZone.ANCHOR
        assert to_legacy_zone(FlowPath.POWER_FLOW) is LegacyZone.ENGINE
        assert to_legacy_zone(FlowPath.BARREL_FLOW) is LegacyZone.WHIP
        assert to_legacy_zone(FlowPath.NONE) is LegacyZone.NONE


class TestSubScoreInterpretation:
    @pytest.mark.parametrize(
        ("score", "text"),
        [(95, "Excellent"), (90, "Excellent"), (85, "Strong"), (72, "Solid"), (60, "Fair"), (59.9, "Needs Work")],
    )
    def test_bands(self, score: float, text: str) -> None:
        assert sub_score_interpretation(score) == text
