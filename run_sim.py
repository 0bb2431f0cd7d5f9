import argparse
import logging
import sys

import numpy as np

from arena_sim import ArenaConfig, sweep_win_rates
from ladder_core import CORE_VERSION, ConfigError, LadderError, LadderSimulation, OutcomeSampler, generate_population
from ladder_report import format_summary, population_frame, rank_distribution, summarize
from logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_ladder_study(args):
    sampler = OutcomeSampler(args.seed)
    population = generate_population(args.players, sampler=sampler)
    sim = LadderSimulation(population, sampler)
    sim.run(args.matches)

    print(format_summary(summarize(population), sim.games_played))
    print(f"Skipped ticks: {sim.skipped_legend} legend, {sim.skipped_no_opponent} no close match")

    if args.top > 0:
        df = population_frame(population)
        legends = df[df["legend"]]
        print()
        if legends.empty:
            print("No player reached legend")
        else:
            print(legends.head(args.top).to_string())
    if args.ranks:
        print()
        print(rank_distribution(population).to_string())


def run_arena_study(args):
    sampler = OutcomeSampler(args.seed)
    if args.step <= 0:
        raise ConfigError(f"--step must be > 0, got {args.step}")
    config = ArenaConfig(starting_gold=args.starting_gold)
    # Half a step past max_rate so it is included
    rates = np.round(np.arange(args.min_rate, args.max_rate + args.step / 2, args.step), 4)
    df = sweep_win_rates(rates, args.runs, sampler, config)
    print(df.to_string(index=False))


def build_parser():
    parser = argparse.ArgumentParser(description=f"Ladder / Arena simulator ({CORE_VERSION})")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    ladder = sub.add_parser("ladder", help="Run the ranked ladder and report legend stats")
    ladder.add_argument("--players", type=int, default=1000)
    ladder.add_argument("--matches", type=int, default=1000000)
    ladder.add_argument("--seed", type=int, default=None)
    ladder.add_argument("--top", type=int, default=10, help="Show the N fastest legends")
    ladder.add_argument("--ranks", action="store_true", help="Print players per rank")
    ladder.set_defaults(func=run_ladder_study)

    arena = sub.add_parser("arena", help="Sweep arena gold per run against win rate")
    arena.add_argument("--runs", type=int, default=100000)
    arena.add_argument("--min-rate", type=float, default=0.30)
    arena.add_argument("--max-rate", type=float, default=0.90)
    arena.add_argument("--step", type=float, default=0.01)
    arena.add_argument("--starting-gold", type=int, default=150)
    arena.add_argument("--seed", type=int, default=None)
    arena.set_defaults(func=run_arena_study)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    try:
        args.func(args)
    except LadderError as e:
        logger.error("Simulation failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
