import numpy as np
import pytest

from flowmarch import Trajectory, analyze_trajectory_results, compare_schemes
from flowmarch.fields import solid_body_rotation, uniform_flow
from flowmarch.tracking import compute_trajectory_statistics, validate_trajectory_data


def test_statistics_for_uniform_flow(uniform_tracker):
    uniform_tracker.march()
    stats = compute_trajectory_statistics(uniform_tracker.trajectory())
    expected = np.hypot(1.0, 0.5)
    assert stats["displacement"]["mean"] == pytest.approx(expected)
    assert stats["path_length"]["max"] == pytest.approx(expected)
    assert stats["speed"]["min"] == pytest.approx(expected)


def test_validation_flags_non_finite():
    positions = np.zeros((2, 1, 2))
    positions[1, 0, 0] = np.nan
    result = validate_trajectory_data(Trajectory(positions=positions, times=np.array([0.0, 1.0])))
    assert not result["valid"]
    assert result["issues"] == ["NaN values found in positions"]


def test_validation_flags_time_axis():
    traj = Trajectory(positions=np.zeros((2, 1, 2)), times=np.array([1.0, 1.0]))
    issues = validate_trajectory_data(traj)["issues"]
    assert len(issues) == 2


def test_analyze_prints_when_verbose(uniform_tracker, capsys):
    uniform_tracker.march()
    stats, validation = analyze_trajectory_results(uniform_tracker.trajectory(), verbose=True)
    out = capsys.readouterr().out
    assert "Particles: 2" in out
    assert validation["valid"]
    assert set(stats) == {"displacement", "path_length", "speed"}


def test_compare_schemes_on_constant_flow():
    result = compare_schemes(0.25, 1.0, [0.0, 1.0], [0.0, 0.0], uniform_flow(1.0, 1.0))
    assert result["schemes"] == ["euler", "ab2"]
    assert result["comparison"]["ab2_vs_euler"]["max_difference"] == pytest.approx(0.0)
    assert set(result["timing"]) == {"euler", "ab2"}


def test_compare_schemes_on_rotation():
    result = compare_schemes(0.125, 1.0, [1.0], [0.0], solid_body_rotation(), schemes=("ab2", "euler"))
    assert result["comparison"]["euler_vs_ab2"]["mean_difference"] > 0.0
