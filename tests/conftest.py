import numpy as np
import pytest

from flowmarch import ParticleTracker, reset_config
from flowmarch.fields import uniform_flow


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def uniform_tracker():
    """Two particles in u=1, v=0.5 flow on a 0.25 grid up to t=1."""
    return ParticleTracker.from_field(0.25, 1.0, [0.0, 1.0], [0.0, -1.0], uniform_flow(1.0, 0.5))


def rotation_error(tracker, index, t):
    """Distance from the exact rigid-rotation position of a particle starting at (1, 0)."""
    p = tracker.particles[0]
    exact = np.array([np.cos(t), np.sin(t)])
    return float(np.hypot(p.x[index] - exact[0], p.y[index] - exact[1]))
