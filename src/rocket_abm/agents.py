"""Rocket and target data containers.

Positions are the top-left corner of the bounding box in playfield pixels,
with y growing downward. Headings are radians, 0 pointing up and positive
turning clockwise.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from rocket_abm.config import SimulationConfig


@dataclass
class Agent:
    """One simulated rocket.

    ``policy`` is borrowed from the population evolver for a single
    generation; the agent never copies or mutates it.
    """
    x: float
    y: float
    width: float
    height: float
    vx: float = 0.0
    vy: float = 0.0
    angle: float = 0.0
    fire_angle: float = 0.0
    active: bool = True
    lifetime: int = 0
    fitness: float = 0.0
    thrusting: bool = False
    policy: Any = None

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def deactivate(self) -> None:
        """Freeze the rocket in place. Callers clamp the position first."""
        self.active = False
        self.thrusting = False
        self.vx = 0.0
        self.vy = 0.0


@dataclass(frozen=True)
class Target:
    """Axis-aligned collection target."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


def spawn_agent(config: SimulationConfig, policy: Any = None) -> Agent:
    """Create a rocket at the shared start pose: resting, nose up."""
    return Agent(x=config.width * config.spawn_x_fraction,
                 y=config.height - config.spawn_bottom_offset,
                 width=config.rocket_width,
                 height=config.rocket_height,
                 policy=policy)


def spawn_agents(config: SimulationConfig, policies: Sequence[Any]) -> List[Agent]:
    """One rocket per policy; only the policies differ between rockets."""
    return [spawn_agent(config, policy) for policy in policies]


def spawn_target(config: SimulationConfig, rng: Optional[np.random.Generator] = None) -> Target:
    """Place a target inside the central band of the playfield.

    The band excludes ``center_margin`` of each dimension on every side and
    the target's own extent, so it never touches the edges.
    """
    rng = rng if rng is not None else np.random.default_rng()
    m = config.center_margin
    min_x = config.width * m
    max_x = config.width * (1 - m)
    min_y = config.height * m
    max_y = config.height * (1 - m)
    x = min_x + rng.random() * (max_x - min_x - config.target_width)
    y = min_y + rng.random() * (max_y - min_y - config.target_height)
    return Target(x=float(x), y=float(y), width=config.target_width, height=config.target_height)
