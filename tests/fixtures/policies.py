import numpy as np

from rocket_abm.config import SimulationConfig

THRUST = [1.0, 0.0, 0.0]
IDLE = [0.0, 0.0, 0.0]
LEFT = [0.0, 1.0, 0.0]
RIGHT = [0.0, 0.0, 1.0]


class ConstPolicy:
    """Policy that ignores its inputs and always returns the same outputs."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.score = None
        self.calls = 0

    def evaluate(self, inputs):
        self.calls += 1
        return self.outputs


class StaticEvolver:
    """Evolver with a fixed population; offspring repeat the best policy's outputs."""

    def __init__(self, population, elitism=0):
        self.population = list(population)
        self.popsize = len(self.population)
        self.elitism = elitism
        self.mutations = 0

    def sort_by_score(self):
        self.population.sort(key=lambda p: -np.inf if p.score is None else p.score, reverse=True)

    def get_offspring(self):
        return ConstPolicy(self.population[0].outputs)

    def mutate_all(self):
        self.mutations += 1


def small_config(**overrides):
    """1000x1000 playfield with 10x10 rockets unless overridden."""
    values = {'width': 1000.0, 'height': 1000.0,
              'rocket_width': 10.0, 'rocket_height': 10.0,
              'popsize': 4, 'lifespan': 100}
    values.update(overrides)
    return SimulationConfig.from_dict(values)
