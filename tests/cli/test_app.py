import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from barrels_engine.cli.app import app

runner = CliRunner()

SESSION_CSV = """\
Velo,LA,Dist,Res,Strike Zone,Level
92.4,18.2,310,Fair,8,hs
0,0,0,Miss,5,hs
81.0,45.1,150,Foul,2,hs
75.5,-8.0,40,Fair,14,hs
"""


@pytest.fixture
def session_csv(tmp_path: Path) -> Path:
    path = tmp_path / "session.csv"
    path.write_text(SESSION_CSV)
    return path


class TestCallback:
    def test_no_command_exits_cleanly(self) -> None:
        result = runner.invoke(app, [])
        assert result.exit_code == 0

    def test_verbose_flag(self) -> None:
        result = runner.invoke(app, ["--verbose", "machine-speed", "90", "--distance", "30"])
        assert result.exit_code == 0


class TestImpactCommand:
    def test_reports_detected_frame(self, swing_file: Path) -> None:
        result = runner.invoke(app, ["impact", str(swing_file), "--fps", "120"])
        assert result.exit_code == 0, result.output
        assert "Impact at frame 300 of 600" in result.output
        assert "Confidence: 1.00" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["impact", str(tmp_path / "missing.json"), "--fps", "120"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_frame_rate(self, swing_file: Path) -> None:
        result = runner.invoke(app, ["impact", str(swing_file), "--fps", "0"])
        assert result.exit_code == 1
        assert "fps must be positive" in result.output

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "swing.json"
        path.write_bytes(b"\xff\xfe\x00")
        result = runner.invoke(app, ["impact", str(path), "--fps", "120"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestPrepareCommand:
    def test_writes_normalized_frames(self, swing_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "normalized.json"
        result = runner.invoke(app, ["prepare", str(swing_file), "--fps", "120", "--output", str(output)])
        assert result.exit_code == 0, result.output
        assert "240 frames at 60 fps" in result.output
        assert "Normalized impact frame: 120" in result.output
        assert len(json.loads(output.read_text())) == 240

    def test_manual_impact_frame(self, swing_file: Path) -> None:
        result = runner.invoke(app, ["prepare", str(swing_file), "--fps", "120", "--impact-frame", "100"])
        assert result.exit_code == 0, result.output
        assert "manual" in result.output
        assert "Kept source frames: 0-340" in result.output

    def test_impact_frame_out_of_range(self, swing_file: Path) -> None:
        result = runner.invoke(app, ["prepare", str(swing_file), "--fps", "120", "--impact-frame", "900"])
        assert result.exit_code == 1

    def test_uses_config_dir(self, swing_file: Path, tmp_path: Path) -> None:
        (tmp_path / "barrels.toml").write_text("[normalize]\ntarget_fps = 120\ntrim_seconds = 1\n")
        result = runner.invoke(app, ["prepare", str(swing_file), "--fps", "120", "--config-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "241 frames at 120 fps" in result.output


class TestTimingCommand:
    def test_full_markup(self) -> None:
        args = ["timing", "--distance", "30", "--speed", "44.6", "--fps", "240"]
        args += ["--release", "0", "--launch", "48", "--contact", "60"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output
        assert "458.52" in result.output
        assert "200.00" in result.output
        assert "50.00" in result.output

    def test_invalid_input_lists_every_problem(self) -> None:
        result = runner.invoke(app, ["timing", "--distance", "10", "--speed", "150", "--fps", "240"])
        assert result.exit_code == 1
        assert "Machine distance must be between 20-60 feet" in result.output
        assert "Machine speed must be between 20-100 mph" in result.output


class TestMachineSpeedCommand:
    def test_converts_game_speed(self) -> None:
        result = runner.invoke(app, ["machine-speed", "90", "--distance", "30"])
        assert result.exit_code == 0
        assert "44.6 mph at 30 ft" in result.output


class TestOnTheBallCommand:
    def test_summarizes_session(self, session_csv: Path) -> None:
        result = runner.invoke(app, ["on-the-ball", str(session_csv)])
        assert result.exit_code == 0, result.output
        assert "On-the-ball (hs): 4 events, 4 swings, 2 fair" in result.output
        assert "50.0%" in result.output

    def test_level_option(self, session_csv: Path) -> None:
        result = runner.invoke(app, ["on-the-ball", str(session_csv), "--level", "mlb"])
        assert result.exit_code == 0, result.output
        assert "(mlb)" in result.output

    def test_config_default_level(self, tmp_path: Path) -> None:
        csv_file = tmp_path / "session.csv"
        csv_file.write_text("EV,LA\n80,20\n")
        (tmp_path / "barrels.toml").write_text('[barrels]\ndefault_level = "youth"\n')
        result = runner.invoke(app, ["on-the-ball", str(csv_file), "--config-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "(youth)" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["on-the-ball", str(tmp_path / "missing.csv")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestLeaksCommand:
    def test_main_leak(self) -> None:
        result = runner.invoke(app, ["leaks", "80", "50", "85", "82", "--band=1"])
        assert result.exit_code == 0, result.output
        assert "Momentum transfer 80 (Above Average)" in result.output
        assert "Main leak: Ground Flow" in result.output

    def test_no_leak(self) -> None:
        result = runner.invoke(app, ["leaks", "80", "80", "80", "80"])
        assert result.exit_code == 0, result.output
        assert "Main leak: none" in result.output

    def test_coach_report(self) -> None:
        result = runner.invoke(app, ["leaks", "80", "60", "65", "90", "--report"])
        assert result.exit_code == 0, result.output
        assert "Coach report" in result.output
        assert "Strengths" in result.output
        assert "Technical: Primary leak: Ground Flow" in result.output

    def test_report_is_opt_in(self) -> None:
        result = runner.invoke(app, ["leaks", "80", "60", "65", "90"])
        assert result.exit_code == 0, result.output
        assert "Coach report" not in result.output

    def test_threshold_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "barrels.toml").write_text("[leaks]\nleak_threshold = 3\n")
        result = runner.invoke(app, ["leaks", "80", "75", "80", "80", "--config-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Main leak: Ground Flow" in result.output

    def test_score_out_of_range(self) -> None:
        result = runner.invoke(app, ["leaks", "120", "80", "80", "80"])
        assert result.exit_code == 1
        assert "within [0, 100]" in result.output

    def test_band_out_of_range(self) -> None:
        result = runner.invoke(app, ["leaks", "80", "80", "80", "80", "--band=7"])
        assert result.exit_code == 1
        assert "between -3 and 3" in result.output

    def test_bad_config(self, tmp_path: Path) -> None:
        (tmp_path / "barrels.toml").write_text("[leaks]\nthreshold = 3\n")
        result = runner.invoke(app, ["leaks", "80", "80", "80", "80", "--config-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "unrecognized keys threshold" in result.output
