# -*- coding: utf-8 -*-

"""
rocket_abm/config.py

This module centralizes all configuration parameters for the rocket
neuro-evolution model. Keeping the playfield, physics constants, sensor
scaling and evolution settings in one place keeps the simulation, the
headless trainer and any renderer consistent with each other.

Contents:
---------
1. PLAYFIELD:
   - Width/height of the simulated canvas (pixels, y grows downward).

2. ROCKET_PHYSICS / ROCKET_GEOMETRY / ROCKET_SPAWN:
   - Drag, gravity, thrust and rotation constants.
   - Bounding box of a rocket and where every rocket of a generation starts.

3. TARGET_SPAWN:
   - Size of the collection target and the central band it spawns in.

4. SENSORS / ACTUATORS:
   - Normalization constants for the neural inputs and the activation
     threshold used to decode the network outputs.

5. FITNESS:
   - Scale and falloff of the proximity reward, weight of the survival reward.

6. EVOLUTION / SIMULATION:
   - Population size, elitism fraction, network topology, mutation settings.
   - Frames per generation.

Usage:
------
Modules read the dictionaries through a ``SimulationConfig`` instance so that
several simulations with different settings can run side by side:

    from rocket_abm.config import SimulationConfig, load_config

    cfg = SimulationConfig()                       # library defaults
    cfg = SimulationConfig.from_dict({'lifespan': 250, 'popsize': 100})
    cfg = load_config('experiment.json')           # same keys, JSON file

Configuration is load-time only; a ``SimulationConfig`` is frozen.
"""
import json
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from rocket_abm.exceptions import ConfigError

# ───────────────────────────────────────────────────────────────────────────────
# 1) PLAYFIELD
# ───────────────────────────────────────────────────────────────────────────────
PLAYFIELD = {
    'width': 1920.0,
    'height': 1080.0,
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) ROCKET PHYSICS, GEOMETRY AND SPAWN
# ───────────────────────────────────────────────────────────────────────────────
ROCKET_PHYSICS = {
    # horizontal velocity multiplier applied every tick
    'drag': 0.99,
    # downward acceleration added to vy every tick (px/tick²)
    'gravity': 0.4,
    # impulse along the nose while thrusting (px/tick²)
    'thrust': 0.45,
    # heading change per tick while a rotate command is held (rad)
    'rotation_speed': math.pi / 180 * 2,
    # kept for reference only: rotation is a fixed increment, not integrated
    'rotation_acceleration': math.pi / 180 * 0.1,
    # cap on the cosmetic exhaust deflection (rad)
    'max_fire_angle': math.pi / 6,
    # exhaust deflection change per tick while rotating (rad)
    'fire_angle_step': 0.1,
    # exponential relaxation factor of the exhaust toward 0 when not rotating
    'fire_angle_relax': 0.1,
}

ROCKET_GEOMETRY = {
    'width': 450.0,
    'height': 280.0,
}

ROCKET_SPAWN = {
    # fraction of the playfield width for the top-left corner
    'x_fraction': 0.5,
    # distance of the top-left corner above the bottom edge (px)
    'bottom_offset': 300.0,
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) TARGET
# ───────────────────────────────────────────────────────────────────────────────
TARGET_SPAWN = {
    'width': 100.0,
    'height': 100.0,
    # keep the target out of the outer 40% band on every side
    'center_margin': 0.4,
}

# ───────────────────────────────────────────────────────────────────────────────
# 4) SENSORS / ACTUATORS
# ───────────────────────────────────────────────────────────────────────────────
SENSORS = {
    # assumed maximum speed used to scale velocity inputs
    'max_speed': 10.0,
    'n_inputs': 11,
}

ACTUATORS = {
    'threshold': 0.5,
    'n_outputs': 3,
}

# ───────────────────────────────────────────────────────────────────────────────
# 5) FITNESS
# ───────────────────────────────────────────────────────────────────────────────
FITNESS = {
    'distance_scale': 1000.0,
    'distance_falloff': 100.0,
    'lifetime_weight': 0.1,
}

# ───────────────────────────────────────────────────────────────────────────────
# 6) EVOLUTION / SIMULATION
# ───────────────────────────────────────────────────────────────────────────────
EVOLUTION = {
    'popsize': 500,
    'elitism_fraction': 0.1,
    'hidden_layers': (10,),
    'mutation_rate': 0.3,
    'mutation_sigma': 0.5,
    'selection_power': 4.0,
}

SIMULATION = {
    # frames per generation
    'lifespan': 500,
}


@dataclass(frozen=True)
class SimulationConfig:
    """Flattened, immutable view of the configuration dictionaries."""

    width: float = PLAYFIELD['width']
    height: float = PLAYFIELD['height']

    drag: float = ROCKET_PHYSICS['drag']
    gravity: float = ROCKET_PHYSICS['gravity']
    thrust: float = ROCKET_PHYSICS['thrust']
    rotation_speed: float = ROCKET_PHYSICS['rotation_speed']
    rotation_acceleration: float = ROCKET_PHYSICS['rotation_acceleration']
    max_fire_angle: float = ROCKET_PHYSICS['max_fire_angle']
    fire_angle_step: float = ROCKET_PHYSICS['fire_angle_step']
    fire_angle_relax: float = ROCKET_PHYSICS['fire_angle_relax']

    rocket_width: float = ROCKET_GEOMETRY['width']
    rocket_height: float = ROCKET_GEOMETRY['height']
    spawn_x_fraction: float = ROCKET_SPAWN['x_fraction']
    spawn_bottom_offset: float = ROCKET_SPAWN['bottom_offset']

    target_width: float = TARGET_SPAWN['width']
    target_height: float = TARGET_SPAWN['height']
    center_margin: float = TARGET_SPAWN['center_margin']

    max_speed: float = SENSORS['max_speed']
    output_threshold: float = ACTUATORS['threshold']

    distance_scale: float = FITNESS['distance_scale']
    distance_falloff: float = FITNESS['distance_falloff']
    lifetime_weight: float = FITNESS['lifetime_weight']

    popsize: int = EVOLUTION['popsize']
    elitism_fraction: float = EVOLUTION['elitism_fraction']
    hidden_layers: Tuple[int, ...] = EVOLUTION['hidden_layers']
    mutation_rate: float = EVOLUTION['mutation_rate']
    mutation_sigma: float = EVOLUTION['mutation_sigma']
    selection_power: float = EVOLUTION['selection_power']

    lifespan: int = SIMULATION['lifespan']

    def __post_init__(self):
        self.validate()

    @property
    def elitism(self) -> int:
        """Number of top policies carried over unchanged (halves round up)."""
        return int(math.floor(self.elitism_fraction * self.popsize + 0.5))

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return (SENSORS['n_inputs'],) + tuple(self.hidden_layers) + (ACTUATORS['n_outputs'],)

    def validate(self) -> None:
        """Raise ``ConfigError`` when the settings cannot describe a simulation."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f'playfield must be positive, got {self.width}x{self.height}')
        if self.rocket_width <= 0 or self.rocket_height <= 0:
            raise ConfigError('rocket extents must be positive')
        if self.rocket_width > self.width or self.rocket_height > self.height:
            raise ConfigError('rocket does not fit in the playfield')
        if self.target_width <= 0 or self.target_height <= 0:
            raise ConfigError('target extents must be positive')
        if not 0.0 <= self.center_margin < 0.5:
            raise ConfigError(f'center_margin must be in [0, 0.5), got {self.center_margin}')
        band = 1.0 - 2.0 * self.center_margin
        if self.width * band < self.target_width or self.height * band < self.target_height:
            raise ConfigError(
                f'center band {self.width * band:g}x{self.height * band:g} cannot hold a '
                f'{self.target_width}x{self.target_height} target')
        if not 0.0 < self.drag <= 1.0:
            raise ConfigError(f'drag must be in (0, 1], got {self.drag}')
        if self.max_speed <= 0:
            raise ConfigError('max_speed must be positive')
        if self.distance_falloff <= 0:
            raise ConfigError('distance_falloff must be positive')
        if int(self.popsize) < 1:
            raise ConfigError(f'popsize must be >= 1, got {self.popsize}')
        if not 0.0 <= self.elitism_fraction <= 1.0:
            raise ConfigError(f'elitism_fraction must be in [0, 1], got {self.elitism_fraction}')
        if int(self.lifespan) < 1:
            raise ConfigError(f'lifespan must be >= 1, got {self.lifespan}')
        if any(int(n) < 1 for n in self.hidden_layers):
            raise ConfigError('hidden layer sizes must be >= 1')

    @classmethod
    def from_dict(cls, overrides: Mapping[str, Any]) -> 'SimulationConfig':
        """Build a config from the defaults with ``overrides`` applied.

        Unknown keys raise ``ConfigError`` so that typos in experiment files
        do not silently fall back to defaults.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f'unknown configuration keys: {", ".join(unknown)}')
        values = dict(overrides)
        try:
            if 'hidden_layers' in values:
                values['hidden_layers'] = tuple(int(n) for n in values['hidden_layers'])
            for key in ('popsize', 'lifespan'):
                if key in values:
                    values[key] = int(values[key])
            return cls(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f'invalid configuration value: {exc}') from exc

    def with_overrides(self, **overrides: Any) -> 'SimulationConfig':
        return replace(self, **overrides)


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """Read a JSON object of overrides from ``path``."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f'could not read configuration {path}: {exc}') from exc
    if not isinstance(raw, dict):
        raise ConfigError(f'configuration {path} must hold a JSON object')
    return SimulationConfig.from_dict(raw)
