"""Neuro-evolution of thrust-controlled rockets toward a random target."""

from rocket_abm.config import SimulationConfig, load_config
from rocket_abm.evolver import PerceptronEvolver, PerceptronPolicy, evolve_population
from rocket_abm.simulation import GenerationController, GenerationState, Phase

__version__ = '0.1.0'
