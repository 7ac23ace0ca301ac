import numpy as np
import pytest

from flowmarch import (
    InvalidParameterError,
    MismatchedInitialConditionsError,
    Particle,
    ParticleIndexError,
    ParticleSet,
    Trajectory,
)


def test_initialize_one_particle_per_condition():
    ps = ParticleSet.initialize([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
    assert len(ps) == 3
    assert [p.initial_position for p in ps] == [(1.0, 4.0), (2.0, 5.0), (3.0, 6.0)]
    np.testing.assert_array_equal(ps.initial_positions, [[1, 4], [2, 5], [3, 6]])
    assert ps.buffer_length == 1


def test_mismatched_lengths():
    with pytest.raises(MismatchedInitialConditionsError):
        ParticleSet.initialize([1.0, 2.0], [1.0])


def test_empty_set_is_allowed():
    ps = ParticleSet.initialize([], [])
    assert len(ps) == 0
    assert ps.buffer_length == 0
    x, y = ps.as_arrays()
    assert x.shape == (0, 0)


def test_non_finite_initial_condition_rejected():
    with pytest.raises(InvalidParameterError):
        ParticleSet.initialize([0.0, float("nan")], [0.0, 0.0])


def test_resize_keeps_initial_condition_and_zero_fills():
    ps = ParticleSet.initialize([1.5], [-2.5])
    ps.resize_to_step_count(4)
    p = ps[0]
    assert len(p) == 5
    np.testing.assert_array_equal(p.x, [1.5, 0, 0, 0, 0])
    np.testing.assert_array_equal(p.y, [-2.5, 0, 0, 0, 0])


def test_resize_preserves_written_prefix():
    p = Particle(1.0, 2.0)
    p.resize(4)
    p.x[:] = [1.0, 2.0, 3.0, 4.0]
    p.resize(6)
    np.testing.assert_array_equal(p.x, [1, 2, 3, 4, 0, 0])
    p.resize(3)
    np.testing.assert_array_equal(p.x, [1, 2, 3])


def test_particle_dtype_follows_request():
    ps = ParticleSet.initialize([1.0], [2.0], dtype=np.float32)
    ps.resize_to_step_count(2)
    assert ps[0].x.dtype == np.float32


@pytest.mark.parametrize("index", [-1, 2, 10, True, 1.0])
def test_index_checked(index):
    ps = ParticleSet.initialize([0.0, 1.0], [0.0, 1.0])
    with pytest.raises(ParticleIndexError):
        ps[index]


def test_index_error_is_index_error():
    ps = ParticleSet.initialize([0.0], [0.0])
    with pytest.raises(IndexError):
        ps[1]


def test_write_step_and_positions_at():
    ps = ParticleSet.initialize([0.0, 1.0], [0.0, 1.0])
    ps.resize_to_step_count(1)
    ps.write_step(1, np.array([5.0, 6.0]), np.array([7.0, 8.0]))
    xs, ys = ps.positions_at(1)
    np.testing.assert_array_equal(xs, [5.0, 6.0])
    np.testing.assert_array_equal(ys, [7.0, 8.0])


def test_trajectory_snapshot_excludes_trailing_slot():
    ps = ParticleSet.initialize([0.0, 1.0], [0.0, 0.0])
    ps.resize_to_step_count(2)
    for i in (1, 2):
        xs, ys = ps.positions_at(i - 1)
        ps.write_step(i, xs + 1.0, ys)
    traj = Trajectory.from_particle_set(ps, np.array([0.0, 1.0]))
    assert traj.positions.shape == (2, 2, 2)
    assert traj.num_timesteps == 2
    assert traj.num_particles == 2
    np.testing.assert_array_equal(traj.get_positions_at_time(1)[:, 0], [1.0, 2.0])
    np.testing.assert_allclose(traj.compute_displacement(), [1.0, 1.0])
    np.testing.assert_allclose(traj.compute_path_length(), [1.0, 1.0])
    np.testing.assert_allclose(traj.compute_speeds(), [[1.0, 1.0]])
    assert traj.duration == 1.0


def test_trajectory_shape_validation():
    with pytest.raises(ValueError):
        Trajectory(positions=np.zeros((3, 2)), times=np.zeros(3))
    with pytest.raises(ValueError):
        Trajectory(positions=np.zeros((3, 2, 2)), times=np.zeros(4))


def test_trajectory_particle_lookup():
    traj = Trajectory(positions=np.arange(12, dtype=float).reshape(3, 2, 2), times=np.arange(3.0))
    path, times = traj.get_particle_trajectory(1)
    np.testing.assert_array_equal(path[:, 0], [2.0, 6.0, 10.0])
    np.testing.assert_array_equal(times, [0.0, 1.0, 2.0])
    with pytest.raises(ParticleIndexError):
        traj.get_particle_trajectory(2)
