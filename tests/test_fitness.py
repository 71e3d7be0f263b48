import math

import numpy as np

from rocket_abm.agents import Agent, Target
from rocket_abm.fitness import (center_distance, distance_fitness, evaluate_fitness,
                                lifetime_fitness, reached_target)

from fixtures.policies import small_config


def test_distance_fitness_peak_at_zero():
    assert distance_fitness(0.0) == 1000.0
    assert math.isclose(distance_fitness(100.0), 1000.0 / math.e)


def test_distance_fitness_monotone():
    d = np.linspace(0.0, 5000.0, 500)
    f = np.array([distance_fitness(x) for x in d])
    assert np.all(np.diff(f) <= 0.0)
    assert np.all(f >= 0.0)


def test_fitness_on_target_center():
    cfg = small_config()
    t = Target(x=100.0, y=100.0, width=100.0, height=100.0)
    a = Agent(x=145.0, y=145.0, width=10.0, height=10.0, lifetime=37)
    assert center_distance(a, t) == 0.0
    assert math.isclose(evaluate_fitness(a, t, cfg), 1000.0 + 37 * 0.1)


def test_lifetime_term_is_linear():
    assert lifetime_fitness(0) == 0.0
    assert math.isclose(lifetime_fitness(500), 50.0)


def _agent_at_distance(target, dist):
    # rocket 450 x 280, center placed ``dist`` to the right of the target center
    tcx, tcy = target.center
    return Agent(x=tcx + dist - 225.0, y=tcy - 140.0, width=450.0, height=280.0)


def test_collision_boundary_is_exact():
    t = Target(x=0.0, y=0.0, width=100.0, height=100.0)
    threshold = (450.0 + 100.0) / 4
    eps = 1e-6
    assert reached_target(_agent_at_distance(t, threshold - eps), t)
    assert not reached_target(_agent_at_distance(t, threshold + eps), t)


def test_identical_centers_is_a_hit():
    t = Target(x=0.0, y=0.0, width=100.0, height=100.0)
    assert reached_target(_agent_at_distance(t, 0.0), t)
