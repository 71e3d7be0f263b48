"""Sensor encoding: world state to the eleven neural-network inputs.

The vector is the only thing a policy sees and is rebuilt every tick from
the current rocket and target state.

Two components fall outside [-1, 1] / [0, 1] in some quadrants: the
target bearing (``atan2 / 2pi`` keeps its sign) and the bearing minus the
normalized heading. Both are kept as observed; trained policies depend on
the exact encoding.
"""
from typing import Sequence
import math

import numpy as np

from rocket_abm.agents import Agent, Target
from rocket_abm.config import SimulationConfig

TWO_PI = 2 * math.pi

INPUT_LABELS = (
    'dx_target',
    'dy_target',
    'vx',
    'vy',
    'bearing_target',
    'heading',
    'bearing_minus_heading',
    'dist_left',
    'dist_right',
    'dist_top',
    'dist_bottom',
)

N_INPUTS = len(INPUT_LABELS)


def encode_inputs(agent: Agent, target: Target, config: SimulationConfig) -> np.ndarray:
    """Return the (11,) float64 input vector for ``agent``.

    Parameters
    - agent: rocket whose state is encoded
    - target: shared, read-only collection target
    - config: playfield size and velocity scale

    Returns
    - inputs: array ordered as ``INPUT_LABELS``
    """
    acx, acy = agent.center
    tcx, tcy = target.center
    w = config.width
    h = config.height

    bearing = math.atan2(tcy - acy, tcx - acx) / TWO_PI
    # truncated remainder: negative headings stay negative
    heading = math.fmod(agent.angle, TWO_PI) / TWO_PI

    return np.array([
        (tcx - acx) / w,
        (tcy - acy) / h,
        agent.vx / config.max_speed,
        agent.vy / config.max_speed,
        bearing,
        heading,
        bearing - heading,
        agent.x / w,
        (w - (agent.x + agent.width)) / w,
        agent.y / h,
        (h - (agent.y + agent.height)) / h,
    ], dtype=float)


def encode_population(agents: Sequence[Agent], target: Target, config: SimulationConfig) -> np.ndarray:
    """Stack the input vectors of ``agents`` into an (N, 11) array."""
    if len(agents) == 0:
        return np.zeros((0, N_INPUTS), dtype=float)
    return np.vstack([encode_inputs(a, target, config) for a in agents])
