import io
import itertools
import warnings

import numpy as np
import pytest

from flowmarch import (
    InvalidParameterError,
    MarchCancelledError,
    MismatchedInitialConditionsError,
    NotInitializedError,
    NumericalFailureError,
    ParticleTracker,
    TrackerOptions,
    VelocityField,
    configure,
)
from flowmarch.fields import double_gyre, uniform_flow


def _unit_u(t, x, y):
    return 1.0


def _zero(t, x, y):
    return 0.0


SETTERS = {
    "time": lambda tr: tr.set_time(0.25, 1.0),
    "ics": lambda tr: tr.set_initial_conditions([0.0, 2.0], [1.0, 3.0]),
    "field": lambda tr: tr.set_velocity_field(_unit_u, _zero),
}


@pytest.mark.parametrize("order", list(itertools.permutations(SETTERS)))
def test_setters_in_any_order(order):
    tracker = ParticleTracker()
    for name in order:
        SETTERS[name](tracker)
    assert tracker.is_ready
    assert all(len(p) == tracker.step_count + 1 for p in tracker.particles)
    tracker.march()
    np.testing.assert_allclose(tracker.particles[1].x, 2.0 + 0.25 * np.arange(6))


def test_constructor_with_every_argument_is_ready():
    tracker = ParticleTracker(0.5, 2.0, [1.0], [1.0], _unit_u, _zero)
    assert tracker.is_ready
    assert tracker.step_count == 5
    assert tracker.num_particles == 1
    assert len(tracker.particles[0]) == 6


def test_buffers_not_sized_until_both_grid_and_ics_known():
    tracker = ParticleTracker()
    tracker.set_initial_conditions([1.0], [2.0])
    assert len(tracker.particles[0]) == 1
    tracker.set_time(0.5, 1.0)
    assert len(tracker.particles[0]) == 4


def test_reconfiguring_time_resizes_buffers(uniform_tracker):
    uniform_tracker.march()
    uniform_tracker.set_time(0.5, 1.0)
    assert all(len(p) == 4 for p in uniform_tracker.particles)
    uniform_tracker.set_time(0.125, 1.0)
    assert all(len(p) == 10 for p in uniform_tracker.particles)
    assert uniform_tracker.particles[1].initial_position == (1.0, -1.0)


def test_reconfiguring_ics_replaces_particles(uniform_tracker):
    uniform_tracker.set_initial_conditions([5.0], [6.0])
    assert uniform_tracker.num_particles == 1
    assert len(uniform_tracker.particles[0]) == 6


def test_failed_set_time_keeps_previous_grid(uniform_tracker):
    with pytest.raises(InvalidParameterError):
        uniform_tracker.set_time(0.0, 1.0)
    with pytest.raises(InvalidParameterError):
        uniform_tracker.set_time(0.1, -1.0)
    assert uniform_tracker.dt == 0.25
    assert uniform_tracker.step_count == 5


def test_failed_set_initial_conditions_keeps_previous_particles(uniform_tracker):
    with pytest.raises(MismatchedInitialConditionsError):
        uniform_tracker.set_initial_conditions([1.0, 2.0, 3.0], [1.0])
    assert uniform_tracker.num_particles == 2
    assert uniform_tracker.particles[0].initial_position == (0.0, 0.0)


def test_missing_arguments_rejected():
    tracker = ParticleTracker()
    with pytest.raises(InvalidParameterError):
        tracker.set_time(0.1, None)
    with pytest.raises(InvalidParameterError):
        tracker.set_initial_conditions([1.0], None)
    with pytest.raises(InvalidParameterError):
        tracker.set_velocity_field(_unit_u)


@pytest.mark.parametrize("missing", list(SETTERS))
def test_march_requires_full_setup(missing):
    tracker = ParticleTracker()
    for name, setter in SETTERS.items():
        if name != missing:
            setter(tracker)
    with pytest.raises(NotInitializedError):
        tracker.march()


def test_output_requires_grid_and_ics(tmp_path):
    tracker = ParticleTracker()
    with pytest.raises(NotInitializedError):
        tracker.print_trajectory(0)
    with pytest.raises(NotInitializedError):
        tracker.export_to_file(tmp_path / "out.json")
    with pytest.raises(NotInitializedError):
        tracker.trajectory()
    assert not (tmp_path / "out.json").exists()


def test_unknown_scheme(uniform_tracker):
    with pytest.raises(InvalidParameterError):
        uniform_tracker.march("rk4")
    assert uniform_tracker.last_scheme is None


def test_default_scheme_from_config(uniform_tracker):
    configure(default_scheme="ab2")
    uniform_tracker.march()
    assert uniform_tracker.last_scheme == "ab2"


def test_zero_horizon_only_fills_trailing_slot():
    tracker = ParticleTracker.from_field(0.5, 0.0, [1.0], [1.0], uniform_flow(2.0, 0.0))
    tracker.march()
    np.testing.assert_allclose(tracker.particles[0].x, [1.0, 2.0])
    assert tracker.trajectory().positions.shape == (1, 1, 2)


def test_empty_particle_set_marches():
    tracker = ParticleTracker(0.5, 1.0, [], [], _unit_u, _zero)
    tracker.march("ab2")
    assert tracker.num_particles == 0
    assert tracker.trajectory().positions.shape == (3, 0, 2)


def test_nan_velocity_raises_numerical_failure():
    def u(t, x, y):
        return float("nan") if t >= 0.5 else 1.0

    tracker = ParticleTracker(0.25, 1.0, [0.0, 1.0], [0.0, 0.0], u, _zero)
    with pytest.raises(NumericalFailureError) as info:
        tracker.march()
    assert info.value.step == 2
    assert info.value.time == 0.5
    assert info.value.particle == 0


def test_raising_velocity_raises_numerical_failure():
    def u(t, x, y):
        if x > 0.5:
            raise RuntimeError("outside domain")
        return 1.0

    tracker = ParticleTracker(0.25, 1.0, [0.0, 1.0], [0.0, 0.0], u, _zero)
    with pytest.raises(NumericalFailureError) as info:
        tracker.march()
    assert info.value.step == 0
    assert info.value.particle == 1
    assert isinstance(info.value.__cause__, RuntimeError)


def test_nan_propagates_when_checks_disabled():
    def u(t, x, y):
        return float("nan")

    tracker = ParticleTracker(0.5, 1.0, [0.0], [0.0], u, _zero,
                              options=TrackerOptions(check_finite=False))
    tracker.march()
    assert np.isnan(tracker.particles[0].x[1:]).all()
    np.testing.assert_array_equal(tracker.particles[0].y, 0.0)


def test_check_finite_from_config():
    configure(check_finite=False)
    tracker = ParticleTracker(0.5, 1.0, [0.0], [0.0], lambda t, x, y: float("inf"), _zero)
    tracker.march()
    assert np.isinf(tracker.particles[0].x[-1])


def test_progress_callback_receives_fractions(uniform_tracker):
    seen = []
    uniform_tracker.options.progress_callback = seen.append
    uniform_tracker.march()
    assert seen == pytest.approx([0.2, 0.4, 0.6, 0.8, 1.0])


def test_progress_callback_cancels(uniform_tracker):
    uniform_tracker.options.progress_callback = lambda fraction: fraction < 0.5
    with pytest.raises(MarchCancelledError) as info:
        uniform_tracker.march()
    assert info.value.completed_steps == 3
    assert uniform_tracker.last_scheme is None


def test_simple_progress_output(capsys):
    tracker = ParticleTracker(0.25, 1.0, [0.0], [0.0], _unit_u, _zero,
                              options=TrackerOptions(progress_style="simple", progress_desc="Advecting"))
    tracker.march()
    assert "Advecting: 5/5" in capsys.readouterr().out


def test_tqdm_progress_runs():
    pytest.importorskip("tqdm")
    tracker = ParticleTracker(0.25, 1.0, [0.0], [0.0], _unit_u, _zero,
                              options=TrackerOptions(progress_style="tqdm"))
    tracker.march()
    assert tracker.particles[0].x[-1] == pytest.approx(1.25)


def test_numpy_backend_matches_python_backend():
    python_tracker = ParticleTracker.from_field(0.125, 2.0, [0.3, 1.2, 1.7], [0.4, 0.6, 0.2], double_gyre())
    numpy_tracker = ParticleTracker.from_field(0.125, 2.0, [0.3, 1.2, 1.7], [0.4, 0.6, 0.2],
                                               double_gyre(backend="numpy"))
    for tracker in (python_tracker, numpy_tracker):
        tracker.march("ab2")
    for a, b in zip(python_tracker.particles, numpy_tracker.particles):
        np.testing.assert_allclose(a.x, b.x, rtol=1e-12)
        np.testing.assert_allclose(a.y, b.y, rtol=1e-12)


def test_float32_buffers():
    tracker = ParticleTracker(0.5, 1.0, [0.0], [0.0], _unit_u, _zero,
                              options=TrackerOptions(dtype="float32"))
    tracker.march()
    assert tracker.particles[0].x.dtype == np.float32
    np.testing.assert_allclose(tracker.particles[0].x, [0.0, 0.5, 1.0, 1.5])


def test_memory_limit_warning():
    configure(memory_limit_gb=1e-9)
    with pytest.warns(UserWarning, match="Trajectory buffers"):
        ParticleTracker(0.001, 10.0, [0.0], [0.0])


def test_no_warning_for_small_buffers():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        ParticleTracker(0.5, 1.0, [0.0], [0.0])


def test_velocity_field_held_by_reference():
    field = VelocityField(_unit_u, _zero, name="unit")
    tracker = ParticleTracker.from_field(0.5, 1.0, [0.0], [0.0], field)
    assert tracker.field is field


def test_summary_and_trajectory_metadata(uniform_tracker):
    uniform_tracker.march("ab2")
    info = uniform_tracker.summary()
    assert info["scheme"] == "ab2"
    assert info["field"] == "uniform"
    assert info["num_particles"] == 2
    assert info["step_count"] == 5
    assert info["elapsed_s"] >= 0.0
    traj = uniform_tracker.trajectory()
    assert traj.positions.shape == (5, 2, 2)
    assert traj.metadata["scheme"] == "ab2"
    assert "ab2" in repr(uniform_tracker)


def test_print_trajectory_to_stream(uniform_tracker):
    uniform_tracker.march()
    buf = io.StringIO()
    uniform_tracker.print_trajectory(1, stream=buf)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "     t     x     y"
    assert lines[1] == "  0.00  1.00 -1.00"
    assert len(lines) == 1 + uniform_tracker.step_count


def test_float32_overflow_raises_before_write():
    tracker = ParticleTracker(0.5, 0.0, [0.0], [0.0], lambda t, x, y: 1e39, _zero,
                              options=TrackerOptions(dtype="float32"))
    with pytest.raises(NumericalFailureError, match="float32") as info:
        tracker.march()
    assert info.value.step == 0
    assert info.value.particle == 0
    np.testing.assert_array_equal(tracker.particles[0].x, [0.0, 0.0])


def test_float32_overflow_allowed_when_checks_disabled():
    tracker = ParticleTracker(0.5, 0.0, [0.0], [0.0], lambda t, x, y: 1e39, _zero,
                              options=TrackerOptions(dtype="float32", check_finite=False))
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        tracker.march()
    assert np.isinf(tracker.particles[0].x[1])


def test_wrong_shape_from_numpy_field_raises_numerical_failure():
    field = VelocityField(lambda t, x, y: np.zeros(2), lambda t, x, y: np.zeros(3), backend="numpy")
    tracker = ParticleTracker.from_field(0.5, 1.0, [0.0, 1.0, 2.0], [0.0, 0.0, 0.0], field)
    with pytest.raises(NumericalFailureError) as info:
        tracker.march()
    assert info.value.step == 0
    assert isinstance(info.value.__cause__, ValueError)
