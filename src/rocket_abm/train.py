"""Headless trainer.

Usage:
    rocket-abm-train --generations 50 --seed 1 --history runs/history.csv

Options:
    --generations: number of generations to run (default 10)
    --popsize / --lifespan: override the configured values
    --config: JSON file of SimulationConfig overrides
    --history: write per-generation records to this CSV
    --frames-dir: write one .npz snapshot per frame for offline rendering
    --log-file: also log to this file
    --verbose: debug logging
"""
import argparse
import logging
import sys

from rocket_abm.config import SimulationConfig, load_config
from rocket_abm.evolver import PerceptronEvolver
from rocket_abm.exceptions import RocketABMError
from rocket_abm.io.frame_writer import FrameWriter
from rocket_abm.log import configure_logging
from rocket_abm.simulation import GenerationController

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description='Evolve rockets toward a random target.')
    parser.add_argument('--generations', type=int, default=10)
    parser.add_argument('--popsize', type=int, default=None)
    parser.add_argument('--lifespan', type=int, default=None)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--config', default=None, help='JSON file of configuration overrides')
    parser.add_argument('--history', default=None, help='CSV path for generation records')
    parser.add_argument('--frames-dir', default=None, help='directory for per-frame snapshots')
    parser.add_argument('--log-file', default=None)
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser


def make_config(args) -> SimulationConfig:
    config = load_config(args.config) if args.config else SimulationConfig()
    overrides = {}
    if args.popsize is not None:
        overrides['popsize'] = args.popsize
    if args.lifespan is not None:
        overrides['lifespan'] = args.lifespan
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def train(config: SimulationConfig, generations: int, seed=None, history_path=None, frames_dir=None):
    """Run a training session and return the generation history."""
    evolver = PerceptronEvolver.from_config(config, seed=seed)
    frame_writer = FrameWriter(frames_dir) if frames_dir else None
    try:
        controller = GenerationController(evolver, config, seed=seed, frame_writer=frame_writer)
        log.info('training %d rockets for %d generations (lifespan %d frames, elitism %d)',
                 config.popsize, generations, config.lifespan, config.elitism)
        history = controller.run(generations)
    finally:
        if frame_writer is not None:
            frame_writer.close()

    best = history.best()
    if best is not None:
        log.info('best fitness %.2f in generation %d', best.best_fitness, best.generation)
    if history_path:
        history.to_csv(history_path)
    return history


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    try:
        config = make_config(args)
        train(config, args.generations, seed=args.seed,
              history_path=args.history, frames_dir=args.frames_dir)
    except RocketABMError as exc:
        log.error('training aborted: %s', exc)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
