from pathlib import Path
import json
import subprocess
import sys

import pytest
import yaml

from scripts import cli, solve_solution
from solution_engine import InvalidInputError

SCRIPT = Path(__file__).resolve().parents[1] / "scripts/solve_solution.py"


def _write_request(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data))
    return path


def test_solve_solution_cli(tmp_path: Path):
    request = _write_request(
        tmp_path,
        {
            "substances": ["potassium_nitrate", "calcium_nitrate"],
            "targets": {"NO3-N": 150, "K": 200, "Ca": 150},
            "volume": 10,
            "unit": "L",
        },
    )
    out_file = tmp_path / "result.json"
    subprocess.run(
        [
            sys.executable,
            str(SCRIPT),
            str(request),
            "--seed",
            "4",
            "--trials",
            "50",
            "--output",
            str(out_file),
        ],
        check=True,
    )
    data = json.loads(out_file.read_text())
    assert data["volume"] == {"value": 10.0, "unit": "L", "milliliters": 10000.0}
    assert set(data["substance_weights"]) == {"potassium_nitrate", "calcium_nitrate"}
    assert data["deviation"] <= data["diagnostics"]["sampled_deviation"]
    assert data["targets"]["NO3_N"] == 150


def test_solve_solution_cli_rejects_bad_volume(tmp_path: Path):
    request = _write_request(
        tmp_path, {"substances": ["potassium_nitrate"], "targets": {"K": 200}}
    )
    result = subprocess.run(
        [sys.executable, str(SCRIPT), str(request), "--volume", "0"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 2
    assert "volume" in result.stderr


def test_build_payload_inline_substance():
    payload = solve_solution.build_payload(
        {
            "substances": [
                {"id": "calmag", "elements": [{"symbol": "Ca", "percentage": 15}]}
            ],
            "targets": {"Ca": 150},
        },
        volume=1000,
        seed=1,
        trials=100,
        include_ec=False,
    )
    assert payload["ec"] is None
    assert payload["volume"]["unit"] == "mL"
    assert abs(payload["substance_weights"]["calmag"] - 1.0) <= 0.05


def test_main_preset_yaml(tmp_path: Path, capsys):
    request = tmp_path / "request.yaml"
    request.write_text(
        "substances:\n  - potassium_nitrate\n  - magnesium_sulfate\npreset: flowering\nvolume: 1000\n"
    )
    solve_solution.main([str(request), "--seed", "2", "--trials", "20", "--yaml"])
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["targets"]["K"] == 350
    assert data["rating"] in {"excellent", "good", "adjust"}


def test_list_substances_cli():
    script = SCRIPT.parent / "list_substances.py"
    result = subprocess.run(
        [sys.executable, str(script), "--presets"],
        capture_output=True,
        text=True,
        check=True,
    )
    data = json.loads(result.stdout)
    assert set(data) == {"flowering", "general", "vegetative"}


def test_cli_dispatcher_lists_substances():
    result = subprocess.run(
        [sys.executable, "-m", "scripts", "list-substances"],
        cwd=SCRIPT.parents[1],
        capture_output=True,
        text=True,
        check=True,
    )
    assert "potassium_nitrate" in json.loads(result.stdout)


def test_build_payload_rejects_zero_trials():
    with pytest.raises(InvalidInputError):
        solve_solution.build_payload(
            {"substances": ["potassium_nitrate"], "targets": {"K": 200}},
            volume=1000,
            trials=0,
        )


def test_solve_solution_cli_rejects_zero_trials(tmp_path: Path):
    request = _write_request(
        tmp_path, {"substances": ["potassium_nitrate"], "targets": {"K": 200}, "volume": 1000}
    )
    result = subprocess.run(
        [sys.executable, str(SCRIPT), str(request), "--trials", "0"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 2
    assert "trials" in result.stderr


def test_cli_forwards_arguments(capsys):
    cli.main(["list-substances", "--presets"])
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"flowering", "general", "vegetative"}


def test_cli_unknown_command(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["make-coffee"])
    assert exc.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_cli_help_lists_commands(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--help"])
    out = capsys.readouterr().out
    assert "solve-solution" in out
    assert "list-substances" in out
