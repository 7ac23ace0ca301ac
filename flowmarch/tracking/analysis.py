"""
Trajectory analysis utilities for flowmarch.

Provides functions to compute trajectory statistics, validate marched
data, and compare time-marching schemes on the same problem.
"""

import numpy as np
from typing import Dict, Any, Iterable, Tuple


def compute_trajectory_statistics(trajectory) -> Dict[str, Any]:
    """
    Displacement, path length and speed statistics.

    Parameters
    ----------
    trajectory : Trajectory
        Snapshot from ParticleTracker.trajectory()

    Returns
    -------
    Dict[str, Any]
        'displacement', 'path_length' and 'speed' entries, each with
        'values', 'mean', 'std', 'max', 'min'
    """
    def _summary(values: np.ndarray) -> Dict[str, Any]:
        if values.size == 0:
            return {'values': values, 'mean': 0.0, 'std': 0.0, 'max': 0.0, 'min': 0.0}
        return {
            'values': values,
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'max': float(np.max(values)),
            'min': float(np.min(values)),
        }

    return {
        'displacement': _summary(trajectory.compute_displacement()),
        'path_length': _summary(trajectory.compute_path_length()),
        'speed': _summary(trajectory.compute_speeds()),
    }


def validate_trajectory_data(trajectory) -> Dict[str, Any]:
    """
    Check marched data for non-finite values and a consistent time axis.

    Returns
    -------
    Dict[str, Any]
        Validation results with 'valid' boolean and list of 'issues'
    """
    issues = []
    positions = np.asarray(trajectory.positions)

    if np.any(np.isnan(positions)):
        issues.append("NaN values found in positions")
    if np.any(np.isinf(positions)):
        issues.append("Infinite values found in positions")

    times = np.asarray(trajectory.times)
    if times.size and times[0] != 0.0:
        issues.append(f"Time axis starts at {times[0]}, expected 0")
    if times.size > 1 and not np.all(np.diff(times) > 0):
        issues.append("Time axis is not strictly increasing")

    return {
        'valid': len(issues) == 0,
        'issues': issues
    }


def analyze_trajectory_results(trajectory, verbose: bool = True) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Validate a trajectory and compute its statistics.

    Returns
    -------
    Tuple[Dict[str, Any], Dict[str, Any]]
        (statistics, validation_results)
    """
    validation = validate_trajectory_data(trajectory)
    stats = compute_trajectory_statistics(trajectory)

    if verbose:
        print("Trajectory analysis")
        print(f"   Time steps: {trajectory.T}")
        print(f"   Particles: {trajectory.N}")
        print(f"   Duration: {trajectory.duration:.3f}")
        print(f"   Data validation: {'PASSED' if validation['valid'] else 'FAILED'}")
        for issue in validation['issues']:
            print(f"      {issue}")
        disp = stats['displacement']
        print(f"   Mean displacement: {disp['mean']:.3f} +/- {disp['std']:.3f}")
        print(f"   Max displacement: {disp['max']:.3f}")
        print(f"   Mean path length: {stats['path_length']['mean']:.3f}")

    return stats, validation


def compare_schemes(
    dt: float,
    tmax: float,
    x0,
    y0,
    field,
    schemes: Iterable[str] = ('euler', 'ab2'),
    options=None,
) -> Dict[str, Any]:
    """
    March the same problem with several schemes.

    Parameters
    ----------
    dt, tmax, x0, y0 : see ParticleTracker
    field : VelocityField
    schemes : iterable of str
        Scheme names; the first is the reference for differences

    Returns
    -------
    Dict[str, Any]
        'trajectories' (name -> Trajectory), 'timing' (name -> seconds) and
        'comparison' ('<name>_vs_<ref>' -> final-position difference stats)
    """
    from .tracker import ParticleTracker

    results = {
        'schemes': list(schemes),
        'trajectories': {},
        'timing': {},
        'comparison': {},
    }

    for name in results['schemes']:
        tracker = ParticleTracker.from_field(dt, tmax, x0, y0, field, options=options)
        tracker.march(name)
        traj = tracker.trajectory()
        results['trajectories'][name] = traj
        results['timing'][name] = traj.metadata.get('elapsed_s')

    names = results['schemes']
    if len(names) >= 2:
        ref = names[0]
        ref_final = results['trajectories'][ref].positions[-1]
        for name in names[1:]:
            test_final = results['trajectories'][name].positions[-1]
            diffs = np.linalg.norm(test_final - ref_final, axis=1)
            results['comparison'][f'{name}_vs_{ref}'] = {
                'mean_difference': float(np.mean(diffs)) if diffs.size else 0.0,
                'max_difference': float(np.max(diffs)) if diffs.size else 0.0,
            }
    return results
