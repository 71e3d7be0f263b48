"""
simulation.py

Generation controller for the rocket neuro-evolution model.

A ``GenerationController`` owns one ``GenerationState`` and advances it one
frame per ``step()`` call, so any driver (real-time renderer, headless
trainer, test harness) sets its own cadence. Per frame, every active rocket
goes through

    sensors -> policy -> actuators -> physics -> fitness -> target contact

A generation ends when the frame counter reaches the lifespan or when no
rocket is active, whichever comes first. The check runs before a frame is
processed. At the boundary the rockets' fitness is written onto their
policies, the evolver builds the next population, and a fresh target and
rocket set are created.

Rockets only read the shared target and write their own state, so the
outcome of a frame does not depend on the order rockets are visited in.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import logging

import numpy as np

from rocket_abm.actuators import apply_command, decode_outputs
from rocket_abm.agents import Agent, Target, spawn_agents, spawn_target
from rocket_abm.config import SimulationConfig
from rocket_abm.evolver import PopulationEvolver, check_population, evolve_population
from rocket_abm.exceptions import MalformedOutputError
from rocket_abm.fitness import evaluate_fitness, reached_target
from rocket_abm.history import END_INACTIVE, END_LIFESPAN, GenerationHistory, GenerationSummary
from rocket_abm.physics import clamp_to_playfield, step_body
from rocket_abm.sensors import encode_inputs

logger = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = 'running'
    ENDED = 'ended'


@dataclass
class GenerationState:
    """Everything a renderer needs to draw a frame.

    Owned by a single controller; replaced wholesale (agents, target,
    counters) at every generation boundary.
    """
    target: Target
    agents: List[Agent]
    generation: int = 0
    frame: int = 0
    best_fitness: float = 0.0
    targets_reached: int = 0
    phase: Phase = Phase.RUNNING
    end_reason: Optional[str] = None
    history: GenerationHistory = field(default_factory=GenerationHistory)

    @property
    def active_count(self) -> int:
        return sum(1 for a in self.agents if a.active)

    @property
    def all_inactive(self) -> bool:
        return not any(a.active for a in self.agents)

    @property
    def best_lifetime(self) -> int:
        return max((a.lifetime for a in self.agents), default=0)

    def snapshot(self) -> Dict[str, np.ndarray]:
        """Agent state as parallel numpy arrays plus the target box."""
        agents = self.agents
        return {
            'x': np.array([a.x for a in agents], dtype=float),
            'y': np.array([a.y for a in agents], dtype=float),
            'vx': np.array([a.vx for a in agents], dtype=float),
            'vy': np.array([a.vy for a in agents], dtype=float),
            'angle': np.array([a.angle for a in agents], dtype=float),
            'fire_angle': np.array([a.fire_angle for a in agents], dtype=float),
            'active': np.array([a.active for a in agents], dtype=bool),
            'thrusting': np.array([a.thrusting for a in agents], dtype=bool),
            'fitness': np.array([a.fitness for a in agents], dtype=float),
            'lifetime': np.array([a.lifetime for a in agents], dtype=int),
            'target': np.array([self.target.x, self.target.y,
                                self.target.width, self.target.height], dtype=float),
            'counters': np.array([self.generation, self.frame], dtype=int),
        }


class GenerationController:
    """Drives rockets frame by frame and runs the evolution step between generations.

    Parameters
    - evolver: object honouring ``PopulationEvolver``; its current population
      supplies one policy per rocket
    - config: ``SimulationConfig`` (library defaults when omitted)
    - seed: seed for target placement
    - frame_writer: optional ``FrameWriter`` receiving a snapshot per frame
    """

    def __init__(self, evolver: PopulationEvolver, config: Optional[SimulationConfig] = None,
                 seed=None, frame_writer=None):
        self.evolver = evolver
        self.config = config if config is not None else SimulationConfig()
        self.rng = np.random.default_rng(seed)
        self.frame_writer = frame_writer
        check_population(self.evolver)
        self.state = GenerationState(target=spawn_target(self.config, self.rng),
                                     agents=spawn_agents(self.config, self.evolver.population))

    # ------------------------------------------------------------------
    # per-frame pipeline
    # ------------------------------------------------------------------
    def generation_over(self) -> Optional[str]:
        """End reason if the current generation must stop before the next frame."""
        if self.state.frame >= self.config.lifespan:
            return END_LIFESPAN
        if self.state.all_inactive:
            return END_INACTIVE
        return None

    def update_agent(self, agent: Agent) -> None:
        """Advance one active rocket by a frame."""
        if not agent.active:
            return
        state = self.state
        inputs = encode_inputs(agent, state.target, self.config)
        try:
            command = decode_outputs(agent.policy.evaluate(inputs), self.config.output_threshold)
        except MalformedOutputError as exc:
            logger.warning('deactivating rocket after malformed policy output in generation %d, frame %d: %s',
                           state.generation, state.frame, exc)
            clamp_to_playfield(agent, self.config)
            agent.deactivate()
            return

        agent.lifetime += 1
        apply_command(agent, command, self.config)
        step_body(agent, self.config)

        agent.fitness = evaluate_fitness(agent, state.target, self.config)
        if agent.fitness > state.best_fitness:
            state.best_fitness = agent.fitness

        if agent.active and reached_target(agent, state.target):
            agent.deactivate()
            state.targets_reached += 1
            logger.debug('rocket reached the target in generation %d after %d frames',
                         state.generation, agent.lifetime)

    def step(self) -> Optional[GenerationSummary]:
        """Process one frame, or close the generation if it is over.

        Returns the finished generation's summary on a boundary, else None.
        """
        reason = self.generation_over()
        if reason is not None:
            self.state.phase = Phase.ENDED
            self.state.end_reason = reason
            return self.end_generation()

        for agent in self.state.agents:
            self.update_agent(agent)
        self.state.frame += 1

        if self.frame_writer is not None:
            self.frame_writer.append(self.state.generation, self.state.frame, self.state.snapshot())
        return None

    # ------------------------------------------------------------------
    # generation boundary
    # ------------------------------------------------------------------
    def summarize(self) -> GenerationSummary:
        state = self.state
        fitness = [a.fitness for a in state.agents]
        return GenerationSummary(generation=state.generation,
                                 frames=state.frame,
                                 end_reason=state.end_reason,
                                 best_fitness=float(max(fitness, default=0.0)),
                                 mean_fitness=float(np.mean(fitness)) if fitness else 0.0,
                                 best_lifetime=state.best_lifetime,
                                 targets_reached=state.targets_reached,
                                 active_at_end=state.active_count,
                                 population=len(state.agents))

    def end_generation(self) -> GenerationSummary:
        """Score, evolve and reset. The next frame belongs to the new generation."""
        state = self.state
        for agent in state.agents:
            agent.policy.score = agent.fitness

        summary = self.summarize()
        state.history.append(summary)
        logger.info('Generation %d ended (%s) at frame %d: best fitness = %.2f, best lifetime = %d, targets reached = %d',
                    summary.generation,
                    'lifespan reached' if summary.end_reason == END_LIFESPAN else 'all rockets inactive',
                    summary.frames, summary.best_fitness, summary.best_lifetime, summary.targets_reached)

        # raises PopulationSizeError before anything of the next generation exists
        evolve_population(self.evolver)

        state.generation += 1
        state.frame = 0
        state.best_fitness = 0.0
        state.targets_reached = 0
        state.end_reason = None
        state.target = spawn_target(self.config, self.rng)
        state.agents = spawn_agents(self.config, self.evolver.population)
        state.phase = Phase.RUNNING
        return summary

    # ------------------------------------------------------------------
    # drivers
    # ------------------------------------------------------------------
    def run_generation(self) -> GenerationSummary:
        """Step until the current generation closes and return its summary."""
        # lifespan frames plus the boundary call
        for _ in range(self.config.lifespan + 1):
            summary = self.step()
            if summary is not None:
                return summary
        raise RuntimeError('generation did not terminate within its lifespan')

    def run(self, generations: int) -> GenerationHistory:
        """Run ``generations`` full generations and return the history."""
        for _ in range(int(generations)):
            self.run_generation()
        return self.state.history
