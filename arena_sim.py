import logging
import numpy as np
import pandas as pd

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ladder_core import ConfigError, OutcomeSampler

logger = logging.getLogger(__name__)

# Gold paid out for 0..12 wins
GOLD_REWARDS = [30, 40, 45, 50, 70, 105, 150, 190, 200, 250, 280, 330, 500]


@dataclass
class ArenaConfig:
    max_wins: int = 12
    max_losses: int = 3
    entry_cost: int = 150
    starting_gold: int = 150
    gold_rewards: List[int] = field(default_factory=lambda: list(GOLD_REWARDS))

    def __post_init__(self):
        if self.max_wins < 1 or self.max_losses < 1:
            raise ConfigError("Arena needs max_wins and max_losses >= 1")
        if len(self.gold_rewards) != self.max_wins + 1:
            raise ConfigError(
                f"gold_rewards needs {self.max_wins + 1} entries, got {len(self.gold_rewards)}"
            )


@dataclass
class ArenaResult:
    num_runs: int
    win_rate: float
    gold: int
    bust_count: int # Runs entered while already out of gold
    histogram: np.ndarray # [wins, losses] -> count

    @property
    def gold_per_run(self) -> float:
        if self.num_runs == 0:
            return 0.0
        return self.gold / self.num_runs

    @property
    def avg_wins(self) -> float:
        if self.num_runs == 0:
            return 0.0
        wins = np.arange(self.histogram.shape[0])
        return float((self.histogram.sum(axis=1) * wins).sum() / self.num_runs)

    def finish_rate(self, wins: int) -> float:
        """Fraction of runs that ended on exactly this many wins."""
        if self.num_runs == 0:
            return 0.0
        return float(self.histogram[wins].sum() / self.num_runs)


def _check_win_rate(win_rate: float):
    if not 0.0 <= win_rate <= 1.0:
        raise ConfigError(f"win_rate must be in [0, 1], got {win_rate}")


def arena_run(win_rate: float, sampler: OutcomeSampler, config: Optional[ArenaConfig] = None) -> Tuple[int, int]:
    """Play one arena run until max wins or max losses. Returns (wins, losses)."""
    config = config or ArenaConfig()
    wins = 0
    losses = 0
    while wins < config.max_wins and losses < config.max_losses:
        if sampler.sample_win(win_rate):
            wins += 1
        else:
            losses += 1
    return wins, losses


def arena_reward(wins: int, config: Optional[ArenaConfig] = None) -> int:
    config = config or ArenaConfig()
    if not 0 <= wins <= config.max_wins:
        raise ConfigError(f"wins must be in [0, {config.max_wins}], got {wins}")
    return config.gold_rewards[wins]


def play_arena(num_runs: int, win_rate: float, sampler: OutcomeSampler,
               config: Optional[ArenaConfig] = None) -> ArenaResult:
    if num_runs < 0:
        raise ConfigError(f"num_runs must be >= 0, got {num_runs}")
    _check_win_rate(win_rate)
    config = config or ArenaConfig()

    gold = config.starting_gold
    bust_count = 0
    histogram = np.zeros((config.max_wins + 1, config.max_losses + 1), dtype=int)

    for _ in range(num_runs):
        gold -= config.entry_cost
        # Keep playing on credit so the long-run gold rate stays measurable
        if gold < 0:
            bust_count += 1

        wins, losses = arena_run(win_rate, sampler, config)
        histogram[wins, losses] += 1
        gold += arena_reward(wins, config)

    logger.debug("Arena win_rate=%.2f runs=%d gold=%d busts=%d", win_rate, num_runs, gold, bust_count)
    return ArenaResult(num_runs=num_runs, win_rate=win_rate, gold=gold,
                       bust_count=bust_count, histogram=histogram)


def sweep_win_rates(win_rates: Iterable[float], num_runs: int, sampler: OutcomeSampler,
                    config: Optional[ArenaConfig] = None) -> pd.DataFrame:
    rows = []
    for rate in win_rates:
        result = play_arena(num_runs, float(rate), sampler, config)
        rows.append({
            "win_rate": result.win_rate,
            "gold_per_run": result.gold_per_run,
            "bust_count": result.bust_count,
            "avg_wins": result.avg_wins,
        })
    logger.info("Swept %d win rates at %d runs each", len(rows), num_runs)
    return pd.DataFrame(rows, columns=["win_rate", "gold_per_run", "bust_count", "avg_wins"])
