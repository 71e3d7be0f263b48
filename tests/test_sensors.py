import math

import numpy as np

from rocket_abm.agents import Agent, Target
from rocket_abm.sensors import INPUT_LABELS, N_INPUTS, encode_inputs, encode_population

from fixtures.policies import small_config


def test_input_vector_layout():
    cfg = small_config()
    a = Agent(x=100.0, y=200.0, width=10.0, height=10.0, vx=5.0, vy=-2.0)
    t = Target(x=500.0, y=600.0, width=100.0, height=100.0)
    v = encode_inputs(a, t, cfg)
    assert v.shape == (N_INPUTS,) == (len(INPUT_LABELS),)
    expected = [0.445, 0.445, 0.5, -0.2, 0.125, 0.0, 0.125, 0.1, 0.89, 0.2, 0.79]
    assert np.allclose(v, expected)


def test_negative_bearing_is_kept():
    cfg = small_config()
    # target above and to the left: atan2 lands in (-pi, -pi/2)
    a = Agent(x=600.0, y=600.0, width=10.0, height=10.0)
    t = Target(x=100.0, y=100.0, width=100.0, height=100.0)
    v = encode_inputs(a, t, cfg)
    assert v[4] < 0.0
    assert math.isclose(v[4], math.atan2(150.0 - 605.0, 150.0 - 605.0) / (2 * math.pi))
    assert math.isclose(v[6], v[4] - v[5])


def test_heading_is_truncated_remainder():
    cfg = small_config()
    t = Target(x=0.0, y=0.0, width=100.0, height=100.0)
    neg = Agent(x=100.0, y=100.0, width=10.0, height=10.0, angle=-math.pi / 2)
    wrapped = Agent(x=100.0, y=100.0, width=10.0, height=10.0, angle=2 * math.pi + math.pi / 2)
    assert math.isclose(encode_inputs(neg, t, cfg)[5], -0.25)
    assert math.isclose(encode_inputs(wrapped, t, cfg)[5], 0.25)


def test_wall_distances_negative_out_of_bounds():
    cfg = small_config()
    t = Target(x=0.0, y=0.0, width=100.0, height=100.0)
    a = Agent(x=-20.0, y=995.0, width=10.0, height=10.0)
    v = encode_inputs(a, t, cfg)
    assert v[7] < 0.0
    assert v[10] < 0.0


def test_encoding_is_pure():
    cfg = small_config()
    a = Agent(x=321.5, y=654.25, width=10.0, height=10.0, vx=1.7, vy=-3.3, angle=0.77)
    t = Target(x=480.0, y=410.0, width=100.0, height=100.0)
    first = encode_inputs(a, t, cfg)
    second = encode_inputs(a, t, cfg)
    assert np.array_equal(first, second)
    assert (a.x, a.y, a.vx, a.vy, a.angle) == (321.5, 654.25, 1.7, -3.3, 0.77)


def test_encode_population_shape():
    cfg = small_config()
    t = Target(x=480.0, y=410.0, width=100.0, height=100.0)
    agents = [Agent(x=10.0 * i, y=20.0, width=10.0, height=10.0) for i in range(5)]
    m = encode_population(agents, t, cfg)
    assert m.shape == (5, N_INPUTS)
    assert np.array_equal(m[2], encode_inputs(agents[2], t, cfg))
    assert encode_population([], t, cfg).shape == (0, N_INPUTS)
