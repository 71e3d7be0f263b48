"""Kinematic update of a single rocket.

Per tick, in order: horizontal drag, gravity, optional thrust along the
nose, position integration, then the playfield boundary check. Rotation is
a fixed per-tick increment applied by the actuator stage; the exhaust angle
is purely cosmetic and eased toward its target.
"""
import logging
import math

from rocket_abm.agents import Agent
from rocket_abm.config import SimulationConfig

logger = logging.getLogger(__name__)

ROTATE_LEFT = -1
ROTATE_NONE = 0
ROTATE_RIGHT = 1


def out_of_bounds(agent: Agent, config: SimulationConfig) -> bool:
    """True when any side of the bounding box leaves the playfield."""
    return (agent.x < 0 or agent.x > config.width - agent.width
            or agent.y < 0 or agent.y > config.height - agent.height)


def clamp_to_playfield(agent: Agent, config: SimulationConfig) -> None:
    agent.x = max(0.0, min(agent.x, config.width - agent.width))
    agent.y = max(0.0, min(agent.y, config.height - agent.height))


def enforce_bounds(agent: Agent, config: SimulationConfig) -> bool:
    """Deactivate and clamp a rocket that left the playfield.

    Returns True if the rocket was deactivated by this call.
    """
    if not out_of_bounds(agent, config):
        return False
    clamp_to_playfield(agent, config)
    agent.deactivate()
    logger.debug('rocket left the playfield at (%.1f, %.1f) after %d frames',
                 agent.x, agent.y, agent.lifetime)
    return True


def rotate(agent: Agent, direction: int, config: SimulationConfig) -> None:
    """Turn the heading by one fixed step and move the exhaust angle.

    ``direction`` is ROTATE_LEFT, ROTATE_RIGHT or ROTATE_NONE. The exhaust
    deflects opposite to the turn while rotating and relaxes toward 0
    otherwise, always within +/- max_fire_angle.
    """
    if direction == ROTATE_LEFT:
        agent.angle -= config.rotation_speed
        agent.fire_angle = min(agent.fire_angle + config.fire_angle_step, config.max_fire_angle)
    elif direction == ROTATE_RIGHT:
        agent.angle += config.rotation_speed
        agent.fire_angle = max(agent.fire_angle - config.fire_angle_step, -config.max_fire_angle)
    else:
        agent.fire_angle += (0.0 - agent.fire_angle) * config.fire_angle_relax
        agent.fire_angle = max(-config.max_fire_angle, min(agent.fire_angle, config.max_fire_angle))


def step_body(agent: Agent, config: SimulationConfig) -> None:
    """Advance one active rocket by a single frame.

    Uses ``agent.thrusting`` as set by the actuator stage this tick. Inactive
    rockets are left untouched.
    """
    if not agent.active:
        return
    agent.vx *= config.drag
    agent.vy += config.gravity
    if agent.thrusting:
        agent.vx += config.thrust * math.sin(agent.angle)
        agent.vy -= config.thrust * math.cos(agent.angle)
    agent.x += agent.vx
    agent.y += agent.vy
    enforce_bounds(agent, config)
