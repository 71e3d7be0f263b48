"""Actuator decoding: network outputs to thrust and rotation commands.

Outputs are expected in a bounded activation range (logistic, [0, 1]).
Each channel is a switch that fires above the configured threshold:

    outputs[0]  thrust
    outputs[1]  rotate left   (takes priority)
    outputs[2]  rotate right
"""
from dataclasses import dataclass
from typing import Any

import numpy as np

from rocket_abm.agents import Agent
from rocket_abm.config import ACTUATORS, SimulationConfig
from rocket_abm.exceptions import MalformedOutputError
from rocket_abm.physics import ROTATE_LEFT, ROTATE_NONE, ROTATE_RIGHT, rotate

N_OUTPUTS = ACTUATORS['n_outputs']


@dataclass(frozen=True)
class ActuatorCommand:
    thrust: bool
    rotation: int = ROTATE_NONE


def validate_outputs(outputs: Any) -> np.ndarray:
    """Return ``outputs`` as a float array or raise ``MalformedOutputError``."""
    try:
        raw = np.asarray(outputs)
    except (TypeError, ValueError) as exc:
        raise MalformedOutputError(f'policy output is not numeric: {exc}', outputs) from exc
    # strings, objects and complex values are rejected rather than coerced
    if raw.dtype.kind not in 'biuf':
        raise MalformedOutputError(f'policy output is not numeric: dtype {raw.dtype}', outputs)
    arr = raw.astype(float)
    if arr.ndim != 1 or arr.shape[0] != N_OUTPUTS:
        raise MalformedOutputError(
            f'policy output must have {N_OUTPUTS} values, got shape {arr.shape}', outputs)
    if not np.all(np.isfinite(arr)):
        raise MalformedOutputError('policy output contains non-finite values', outputs)
    return arr


def decode_outputs(outputs: Any, threshold: float = ACTUATORS['threshold']) -> ActuatorCommand:
    """Map a validated output vector to an ``ActuatorCommand``."""
    out = validate_outputs(outputs)
    if out[1] > threshold:
        rotation = ROTATE_LEFT
    elif out[2] > threshold:
        rotation = ROTATE_RIGHT
    else:
        rotation = ROTATE_NONE
    return ActuatorCommand(thrust=bool(out[0] > threshold), rotation=rotation)


def apply_command(agent: Agent, command: ActuatorCommand, config: SimulationConfig) -> None:
    """Set the thrust flag for this tick and apply the rotation step."""
    agent.thrusting = command.thrust
    rotate(agent, command.rotation, config)
