from pathlib import Path

import pytest

from resultsocr import main as cli
from resultsocr.core import ConversionError
from resultsocr.tables import TableType


def test_resolve_args_for_race(tmp_path):
    config = cli.resolve_args(
        [
            "--type",
            "race",
            "--event_id",
            "s6_r01_main",
            "--input",
            str(tmp_path / "in.png"),
            "--output",
            str(tmp_path / "out.csv"),
            "--debug",
        ]
    )
    assert config.table_type is TableType.RACE
    assert config.event_id == "s6_r01_main"
    assert config.input_path == (tmp_path / "in.png").resolve()
    assert config.output_path.is_absolute()
    assert config.debug is True
    assert config.target_width == 3000


def test_resolve_args_standings_without_event_id():
    config = cli.resolve_args(
        ["--type", "constructors-standings", "--input", "a.png", "--output", "b.csv"]
    )
    assert config.table_type is TableType.CONSTRUCTORS_STANDINGS
    assert config.event_id == ""
    assert config.debug is False
    assert config.input_path == Path("a.png").resolve()


def test_resolve_args_accepts_dashed_event_id():
    config = cli.resolve_args(
        ["--type", "race", "--event-id", "ev", "--input", "a.png", "--output", "b.csv"]
    )
    assert config.event_id == "ev"


@pytest.mark.parametrize(
    "argv",
    [
        ["--type", "race", "--input", "a.png", "--output", "b.csv"],
        ["--type", "qualifying", "--input", "a.png", "--output", "b.csv"],
        ["--type", "drivers-standings", "--output", "b.csv"],
        ["--type", "drivers-standings", "--input", "a.png"],
        ["--input", "a.png", "--output", "b.csv"],
        ["--type", "drivers-standings", "--input", "a.png", "--output", "b.csv", "--width", "0"],
        ["--type", "drivers-standings", "--input", "a.png", "--output", "b.csv", "--lang", "deu"],
    ],
)
def test_resolve_args_usage_errors(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.resolve_args(argv)
    assert excinfo.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_main_missing_input(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "--type",
                "drivers-standings",
                "--input",
                str(tmp_path / "missing.png"),
                "--output",
                str(tmp_path / "out.csv"),
            ]
        )
    assert "Input file not found" in str(excinfo.value.code)
    assert not (tmp_path / "out.csv").exists()


def test_main_runs_pipeline(tmp_path, monkeypatch, capsys):
    source = tmp_path / "in.png"
    source.write_bytes(b"")
    captured = {}

    def fake_convert_table(input_path, output_path, table_type, **kwargs):
        captured.update(kwargs, input_path=input_path, table_type=table_type)
        return {"row_count": 2, "csv_path": str(output_path)}

    monkeypatch.setattr(cli, "convert_table", fake_convert_table)

    code = cli.main(
        [
            "--type",
            "race",
            "--event_id",
            "ev",
            "--input",
            str(source),
            "--output",
            str(tmp_path / "out.csv"),
            "--width",
            "2400",
        ]
    )

    assert code == 0
    assert captured["input_path"] == source.resolve()
    assert captured["table_type"] is TableType.RACE
    assert captured["event_id"] == "ev"
    assert captured["target_width"] == 2400
    assert "Wrote 2 row(s)" in capsys.readouterr().out


def test_main_reports_failing_stage(tmp_path, monkeypatch):
    source = tmp_path / "in.png"
    source.write_bytes(b"")

    def fake_convert_table(*args, **kwargs):
        raise ConversionError("Text recognition", "engine crashed")

    monkeypatch.setattr(cli, "convert_table", fake_convert_table)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "--type",
                "drivers-standings",
                "--input",
                str(source),
                "--output",
                str(tmp_path / "out.csv"),
            ]
        )
    assert excinfo.value.code == "Text recognition failed: engine crashed"
