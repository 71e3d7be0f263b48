"""Population evolver contract and a default perceptron implementation.

The simulation only talks to an evolver through ``PopulationEvolver``:
it writes a score on every policy, then calls ``evolve_population`` at the
generation boundary. Any strategy that hands back policies honouring the
``Policy`` contract can be dropped in.

``PerceptronEvolver`` is the bundled strategy: a fixed-topology
feed-forward network per rocket, rank-biased parent selection, blend
crossover and gaussian weight mutation.
"""
from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable
import logging

import numpy as np
from scipy.special import expit

from rocket_abm.config import SimulationConfig
from rocket_abm.exceptions import PopulationSizeError

logger = logging.getLogger(__name__)


@runtime_checkable
class Policy(Protocol):
    """Maps an 11-element sensor vector to a 3-element output vector.

    Must not keep hidden memory between calls within a generation. ``score``
    is written by the simulation before ranking.
    """
    score: Optional[float]

    def evaluate(self, inputs: Sequence[float]) -> Sequence[float]:
        ...


@runtime_checkable
class PopulationEvolver(Protocol):
    population: List[Any]
    popsize: int
    elitism: int

    def get_offspring(self) -> Any:
        ...

    def mutate_all(self) -> None:
        ...

    def sort_by_score(self) -> None:
        ...


def check_population(evolver: PopulationEvolver) -> None:
    """Raise ``PopulationSizeError`` for an empty or mis-sized population."""
    actual = len(evolver.population)
    if evolver.popsize < 1 or actual == 0:
        raise PopulationSizeError('evolver population is empty',
                                  expected=evolver.popsize, actual=actual)
    if actual != evolver.popsize:
        raise PopulationSizeError(
            f'evolver population has {actual} policies, expected {evolver.popsize}',
            expected=evolver.popsize, actual=actual)
    if not 0 <= evolver.elitism <= evolver.popsize:
        raise PopulationSizeError(
            f'elitism {evolver.elitism} outside [0, {evolver.popsize}]',
            expected=evolver.popsize, actual=actual)


def evolve_population(evolver: PopulationEvolver) -> List[Any]:
    """Replace the evolver's population with the next generation.

    Scores must already be written on the policies. The top ``elitism``
    policies are carried over unchanged, the rest of the population is bred
    with ``get_offspring`` and ``mutate_all`` runs once on the assembled
    population.

    Returns the new population.
    """
    check_population(evolver)
    evolver.sort_by_score()

    new_population = list(evolver.population[:evolver.elitism])
    while len(new_population) < evolver.popsize:
        new_population.append(evolver.get_offspring())

    evolver.population = new_population
    evolver.mutate_all()
    check_population(evolver)
    return evolver.population


class PerceptronPolicy:
    """Dense feed-forward network with logistic activations.

    Outputs land in (0, 1), matching the actuator threshold of 0.5.
    """

    def __init__(self, weights: Sequence[np.ndarray], biases: Sequence[np.ndarray]):
        if len(weights) != len(biases):
            raise ValueError('weights and biases must have one entry per layer')
        self.weights = [np.asarray(w, dtype=float) for w in weights]
        self.biases = [np.asarray(b, dtype=float) for b in biases]
        self.score: Optional[float] = None

    @classmethod
    def random(cls, layer_sizes: Sequence[int], rng: np.random.Generator) -> 'PerceptronPolicy':
        weights = [rng.uniform(-1.0, 1.0, size=(n_in, n_out))
                   for n_in, n_out in zip(layer_sizes[:-1], layer_sizes[1:])]
        biases = [rng.uniform(-1.0, 1.0, size=n_out) for n_out in layer_sizes[1:]]
        return cls(weights, biases)

    @property
    def layer_sizes(self):
        return (self.weights[0].shape[0],) + tuple(w.shape[1] for w in self.weights)

    def evaluate(self, inputs: Sequence[float]) -> np.ndarray:
        a = np.asarray(inputs, dtype=float)
        for w, b in zip(self.weights, self.biases):
            a = expit(a @ w + b)
        return a

    def copy(self) -> 'PerceptronPolicy':
        return PerceptronPolicy([w.copy() for w in self.weights], [b.copy() for b in self.biases])


class PerceptronEvolver:
    """Generational evolver over ``PerceptronPolicy`` objects.

    Parameters
    - popsize: number of policies per generation
    - elitism: number of top policies kept verbatim
    - layer_sizes: network topology, inputs first
    - mutation_rate: probability that a non-elite policy is mutated
    - mutation_sigma: std-dev of the gaussian weight noise
    - selection_power: rank bias of parent selection (1 = uniform)
    - seed: seed for the internal ``numpy.random.Generator``
    """

    def __init__(self, popsize, elitism, layer_sizes=(11, 10, 3), mutation_rate=0.3,
                 mutation_sigma=0.5, selection_power=4.0, seed=None):
        if popsize < 1:
            raise PopulationSizeError(f'popsize must be >= 1, got {popsize}',
                                      expected=popsize, actual=0)
        self.popsize = int(popsize)
        self.elitism = int(elitism)
        self.layer_sizes = tuple(int(n) for n in layer_sizes)
        self.mutation_rate = float(mutation_rate)
        self.mutation_sigma = float(mutation_sigma)
        self.selection_power = float(selection_power)
        self.rng = np.random.default_rng(seed)
        self.population = [PerceptronPolicy.random(self.layer_sizes, self.rng)
                           for _ in range(self.popsize)]

    @classmethod
    def from_config(cls, config: SimulationConfig, seed=None) -> 'PerceptronEvolver':
        return cls(popsize=config.popsize,
                   elitism=config.elitism,
                   layer_sizes=config.layer_sizes,
                   mutation_rate=config.mutation_rate,
                   mutation_sigma=config.mutation_sigma,
                   selection_power=config.selection_power,
                   seed=seed)

    def sort_by_score(self) -> None:
        """Sort the population by score, best first. Unscored policies go last."""
        self.population.sort(key=lambda p: -np.inf if p.score is None else p.score, reverse=True)

    def _select_parent(self) -> PerceptronPolicy:
        # assumes the population is sorted best first
        n = len(self.population)
        idx = int(np.floor(self.rng.random() ** self.selection_power * n))
        return self.population[min(idx, n - 1)]

    def get_offspring(self) -> PerceptronPolicy:
        """Breed one child by blending two rank-selected parents."""
        parent1 = self._select_parent()
        parent2 = self._select_parent()
        weights = []
        biases = []
        for w1, w2, b1, b2 in zip(parent1.weights, parent2.weights, parent1.biases, parent2.biases):
            weights.append(w1 + self.rng.random(w1.shape) * (w2 - w1))
            biases.append(b1 + self.rng.random(b1.shape) * (b2 - b1))
        return PerceptronPolicy(weights, biases)

    def mutate_all(self) -> None:
        """Perturb the weights of non-elite policies with gaussian noise."""
        for policy in self.population[self.elitism:]:
            if self.rng.random() > self.mutation_rate:
                continue
            for w, b in zip(policy.weights, policy.biases):
                w += self.rng.normal(0.0, self.mutation_sigma, size=w.shape)
                b += self.rng.normal(0.0, self.mutation_sigma, size=b.shape)

    @property
    def best(self) -> Optional[PerceptronPolicy]:
        scored = [p for p in self.population if p.score is not None]
        if not scored:
            return None
        return max(scored, key=lambda p: p.score)
