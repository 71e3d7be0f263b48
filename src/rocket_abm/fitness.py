"""Fitness and target-contact helpers.

fitness = distance_fitness + lifetime_fitness, where the proximity term
decays exponentially with the center-to-center distance and is capped at
``distance_scale`` (reached at distance 0), and the survival term grows
linearly with frames survived.
"""
import math

from rocket_abm.agents import Agent, Target
from rocket_abm.config import FITNESS, SimulationConfig


def center_distance(agent: Agent, target: Target) -> float:
    acx, acy = agent.center
    tcx, tcy = target.center
    return math.hypot(tcx - acx, tcy - acy)


def distance_fitness(dist: float,
                     scale: float = FITNESS['distance_scale'],
                     falloff: float = FITNESS['distance_falloff']) -> float:
    """Proximity reward, strictly decreasing in ``dist``; 0 distance gives ``scale``."""
    return max(0.0, scale * math.exp(-dist / falloff))


def lifetime_fitness(lifetime: int, weight: float = FITNESS['lifetime_weight']) -> float:
    return lifetime * weight


def evaluate_fitness(agent: Agent, target: Target, config: SimulationConfig) -> float:
    """Current fitness of ``agent`` against ``target``."""
    dist = center_distance(agent, target)
    return (distance_fitness(dist, config.distance_scale, config.distance_falloff)
            + lifetime_fitness(agent.lifetime, config.lifetime_weight))


def reached_target(agent: Agent, target: Target) -> bool:
    """Circular overlap test between rocket and target.

    A hit needs the centers strictly closer than a quarter of the summed
    widths.
    """
    threshold = (agent.width + target.width) / 4
    return center_distance(agent, target) < threshold
