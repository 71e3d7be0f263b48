import math

import numpy as np
import pytest

from rocket_abm.actuators import ActuatorCommand, apply_command, decode_outputs, validate_outputs
from rocket_abm.agents import Agent
from rocket_abm.exceptions import MalformedOutputError
from rocket_abm.physics import ROTATE_LEFT, ROTATE_NONE, ROTATE_RIGHT

from fixtures.policies import small_config


def test_decode_thrust_only():
    cmd = decode_outputs([0.9, 0.1, 0.2])
    assert cmd == ActuatorCommand(thrust=True, rotation=ROTATE_NONE)


def test_left_takes_priority_over_right():
    assert decode_outputs([0.0, 0.8, 0.9]).rotation == ROTATE_LEFT
    assert decode_outputs([0.0, 0.2, 0.9]).rotation == ROTATE_RIGHT


def test_threshold_is_strict():
    cmd = decode_outputs(np.array([0.5, 0.5, 0.5]))
    assert cmd == ActuatorCommand(thrust=False, rotation=ROTATE_NONE)


@pytest.mark.parametrize('outputs', [
    [1.0, 0.0],
    [1.0, 0.0, 0.0, 0.0],
    [[1.0, 0.0, 0.0]],
    [np.nan, 0.0, 0.0],
    [0.0, np.inf, 0.0],
    'abc',
    None,
    ['1', '0', '0'],
    [1.0 + 0j, 0.0, 0.0],
])
def test_malformed_outputs_rejected(outputs):
    with pytest.raises(MalformedOutputError):
        validate_outputs(outputs)


def test_apply_command_sets_flag_and_rotates():
    cfg = small_config()
    a = Agent(x=100.0, y=100.0, width=10.0, height=10.0)
    apply_command(a, ActuatorCommand(thrust=True, rotation=ROTATE_RIGHT), cfg)
    assert a.thrusting
    assert math.isclose(a.angle, math.radians(2))
    assert math.isclose(a.fire_angle, -0.1)
    apply_command(a, ActuatorCommand(thrust=False), cfg)
    assert not a.thrusting
    assert math.isclose(a.fire_angle, -0.09)
