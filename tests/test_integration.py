"""Integration tests for batch scoring and the CLI."""

import json
import os

import pytest

from shapefidelity.cli import main
from shapefidelity.config import ScoringConfig
from shapefidelity.io.strokes import parse_records
from shapefidelity.pipeline import score_file, score_records


@pytest.fixture
def stroke_file(temp_dir, square_stroke, straight_line_stroke, make_circle_stroke):
    """A stroke file with one square, one line, one circle and one bad tag."""
    records = [
        {"id": "sq", "shape": "square", "points": [[p.x, p.y] for p in square_stroke]},
        {"id": "ln", "shape": "line", "points": [{"x": p.x, "y": p.y} for p in straight_line_stroke]},
        {
            "id": "ci",
            "shape": "circle",
            "points": [[p.x, p.y] for p in make_circle_stroke(100, 100, 50)],
            "target": {"x": 100, "y": 100, "radius": 50},
        },
        {"id": "hx", "shape": "hexagon", "points": [[0, 0], [1, 1], [2, 0]]},
    ]
    path = os.path.join(temp_dir, "strokes.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f)
    return path


class TestBatchScoring:
    """Tests for score_records and score_file."""

    def test_scores_in_input_order(self, stroke_file):
        report = score_file(stroke_file, config=ScoringConfig())

        assert [r.record_id for r in report.results] == ["sq", "ln", "ci", "hx"]
        assert report.results[0].score == pytest.approx(80.0)
        assert report.results[1].score == pytest.approx(80.0)
        assert report.results[2].score == 100.0
        assert report.results[3].score == 0.0

    def test_rounding(self):
        records = parse_records({"shape": "line", "points": [[0, 0], [50, 7], [100, 1]]})
        config = ScoringConfig()
        config.output.round_digits = 0

        report = score_records(records, config)

        assert report.results[0].score == round(report.results[0].score)

    def test_mean_scores(self, stroke_file):
        report = score_file(stroke_file)

        means = report.mean_scores()

        assert list(means) == ["square", "line", "circle", "hexagon"]
        assert means["hexagon"] == 0.0

    def test_writes_report(self, stroke_file, temp_dir):
        out = os.path.join(temp_dir, "report.json")

        score_file(stroke_file, out_path=out)

        with open(out, encoding="utf-8") as f:
            data = json.load(f)
        assert len(data["results"]) == 4
        assert data["results"][0]["shape"] == "square"


class TestCli:
    """Tests for the command-line interface."""

    def test_score_command(self, stroke_file, temp_dir, capsys):
        out = os.path.join(temp_dir, "cli_report.json")

        code = main(["score", "--input", stroke_file, "--out", out])

        assert code == 0
        assert os.path.exists(out)
        stdout = capsys.readouterr().out
        assert "Scored 4 stroke(s)" in stdout
        assert "square" in stdout

    def test_score_missing_file(self, temp_dir, capsys):
        code = main(["score", "--input", os.path.join(temp_dir, "missing.json")])

        assert code == 1
        assert "File not found" in capsys.readouterr().err

    def test_score_with_trace_file(self, stroke_file, temp_dir):
        trace_path = os.path.join(temp_dir, "trace.log")

        code = main(["score", "--input", stroke_file, "--trace", "--trace-file", trace_path])

        assert code == 0
        with open(trace_path, encoding="utf-8") as f:
            assert "score_records" in f.read()

    def test_default_shape_flag(self, temp_dir, capsys):
        path = os.path.join(temp_dir, "untagged.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"id": "t", "points": [[0, 0], [100, 0]]}, f)

        code = main(["score", "--input", path, "--shape", "line"])

        assert code == 0
        assert "80.00" in capsys.readouterr().out

    def test_target_command(self, capsys):
        code = main(["target", "--shape", "square", "--width", "400", "--height", "870"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["shape_type"] == "square"
        assert len(data["points"]) == 5

    def test_target_canvas_too_small(self, capsys):
        code = main(["target", "--shape", "square", "--width", "400", "--height", "10"])

        assert code == 1

    def test_init_config(self, temp_dir):
        path = os.path.join(temp_dir, "cfg.yaml")

        assert main(["init-config", "--out", path]) == 0
        assert os.path.exists(path)

    def test_no_command(self, capsys):
        assert main([]) == 0

    def test_score_report_path_is_directory(self, stroke_file, temp_dir, capsys):
        code = main(["score", "--input", stroke_file, "--out", temp_dir])

        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_random_circle_target(self, capsys):
        argv = ["target", "--shape", "circle", "--width", "800", "--height", "800", "--random", "--seed", "7"]

        assert main(argv) == 0
        first = json.loads(capsys.readouterr().out)
        assert main(argv) == 0
        second = json.loads(capsys.readouterr().out)

        assert first == second
        assert 120.0 <= first["radius"] <= 200.0
        assert first["x"] - first["radius"] >= 100.0 - 1e-9
        assert first["x"] + first["radius"] <= 700.0 + 1e-9

    def test_random_circle_uses_configured_padding(self, temp_dir, capsys):
        path = os.path.join(temp_dir, "cfg.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write("target:\n  circle_padding: 10\n")

        code = main([
            "target", "--shape", "circle", "--width", "300", "--height", "300",
            "--random", "--seed", "1", "--config", path,
        ])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["y"] - data["radius"] >= 10.0 - 1e-9

    def test_random_requires_circle(self, capsys):
        code = main(["target", "--shape", "square", "--random"])

        assert code == 1
        assert "only applies to circle" in capsys.readouterr().err
