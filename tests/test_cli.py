import json

import pytest

from flowmarch import __version__
from flowmarch.__main__ import main


def test_print_particle(capsys):
    code = main(["--field", "uniform", "--x0", "0,2", "--y0", "0,1",
                 "--dt", "0.5", "--tmax", "1", "--print", "1", "--quiet"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "     t     x     y",
        "  0.00  2.00  1.00",
        "  0.50  2.50  1.00",
        "  1.00  3.00  1.00",
    ]


def test_field_params_and_scheme(capsys):
    code = main(["--field", "uniform", "--field-param", "u0=0", "--field-param", "v0=2",
                 "--x0", "0", "--y0", "0", "--dt", "0.5", "--tmax", "0.5",
                 "--scheme", "ab2", "--print", "0"])
    assert code == 0
    out = capsys.readouterr().out
    assert "with ab2" in out
    assert "  0.50  0.00  1.00" in out


def test_export(tmp_path, capsys):
    path = tmp_path / "run.json"
    code = main(["--field", "rotation", "--x0", "1", "--y0", "0", "--dt", "0.25", "--tmax", "1",
                 "--export", str(path)])
    assert code == 0
    doc = json.loads(path.read_text())
    assert len(doc["t"]) == 5
    assert len(doc["parts"][0]["x"]) == 6
    assert f"Exported trajectories to {path}" in capsys.readouterr().out


def test_summary_and_report(tmp_path, capsys):
    code = main(["--x0", "0,1", "--y0", "0,1", "--summary", "--report-dir", str(tmp_path), "--quiet"])
    assert code == 0
    assert "Trajectory analysis" in capsys.readouterr().out
    assert (tmp_path / "analysis_summary.txt").exists()


@pytest.mark.parametrize("argv", [
    ["--dt", "0"],
    ["--tmax", "-1"],
    ["--x0", "0,1", "--y0", "0"],
    ["--print", "3"],
    ["--field", "rotation", "--field-param", "speed=2"],
    ["--scheme", "rk4"],
])
def test_configuration_errors_exit_2(argv, capsys):
    assert main(argv) == 2
    assert capsys.readouterr().err.startswith("flowmarch:")


def test_numerical_failure_exits_1(capsys):
    # Euler with dt * omega large enough to overflow to inf
    code = main(["--field", "rotation", "--field-param", "omega=1e200",
                 "--x0", "1e200", "--y0", "1e200", "--dt", "1e200", "--tmax", "1e201"])
    assert code == 1
    assert "marching failed" in capsys.readouterr().err


def test_export_failure_exits_1(tmp_path, capsys):
    code = main(["--export", str(tmp_path / "missing" / "run.json"), "--quiet"])
    assert code == 1
    assert "export failed" in capsys.readouterr().err


def test_bad_number_is_usage_error():
    with pytest.raises(SystemExit) as info:
        main(["--x0", "a,b"])
    assert info.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_report_failure_exits_1(tmp_path, capsys):
    blocker = tmp_path / "taken"
    blocker.write_text("not a directory")
    code = main(["--report-dir", str(blocker), "--quiet"])
    assert code == 1
    assert capsys.readouterr().err.startswith("flowmarch: report failed")
