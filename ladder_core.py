import logging
import numpy as np

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Union

CORE_VERSION = "2.0 (Star Ladder)"

logger = logging.getLogger(__name__)


# --- Errors ---

class LadderError(Exception):
    """Base class for ladder simulation failures."""


class InsufficientPopulation(LadderError):
    """Raised when matchmaking is attempted with fewer than two players."""


class ConfigError(LadderError, ValueError):
    """Raised for invalid simulation parameters, before any state is built."""


# --- Configs ---

@dataclass
class RatingConfig:
    # Out of 10 million draws this gives a min around 92 and max around 2889,
    # so the clamp only catches the extreme tails.
    mean: float = 1500.0
    std: float = 270.0
    min_rating: float = 100.0
    max_rating: float = 2900.0

    def __post_init__(self):
        if self.std < 0:
            raise ConfigError(f"Rating std must be >= 0, got {self.std}")
        if self.min_rating > self.max_rating:
            raise ConfigError(
                f"min_rating ({self.min_rating}) is above max_rating ({self.max_rating})"
            )


@dataclass
class LadderConfig:
    legend_threshold: int = 95 # Legend once tier points exceed this
    loss_floor: int = 10 # No point loss at or below this (rank 20 and worse)
    streak_bonus_min: int = 3 # Win streak needed for a bonus star
    streak_bonus_max_points: int = 45 # Bonus stars stop above this (rank 5)
    match_window: int = 3 # Max tier point gap for a pairing
    fudge_factor: float = 0.05 # Win probability floor, 1 - fudge is the ceiling

    def __post_init__(self):
        if not 0.0 <= self.fudge_factor < 0.5:
            raise ConfigError(f"fudge_factor must be in [0, 0.5), got {self.fudge_factor}")
        if self.match_window < 0:
            raise ConfigError(f"match_window must be >= 0, got {self.match_window}")
        if self.streak_bonus_min < 1:
            raise ConfigError(f"streak_bonus_min must be >= 1, got {self.streak_bonus_min}")
        if self.legend_threshold < 0:
            raise ConfigError(f"legend_threshold must be >= 0, got {self.legend_threshold}")

    @property
    def legend_floor(self) -> int:
        # Base legends can't lose points at exactly this value
        return self.legend_threshold + 1

    def is_legend(self, player: "Player") -> bool:
        return player.tier_points > self.legend_threshold


LEGEND_THRESHOLD = LadderConfig.legend_threshold


# --- Player State ---

@dataclass
class Player:
    skill_rating: float = 0.0
    tier_points: int = 0
    wins: int = 0
    losses: int = 0
    win_streak: int = 0
    # Snapshot of wins/losses on the first crossing into legend. 0 = not yet.
    legend_wins_at: int = 0
    legend_losses_at: int = 0

    @property
    def is_legend(self) -> bool:
        # Default ladder only; simulations with custom rules ask LadderConfig.is_legend
        return self.tier_points > LEGEND_THRESHOLD

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played

    @property
    def legend_games(self) -> int:
        return self.legend_wins_at + self.legend_losses_at

    @property
    def legend_win_rate(self) -> float:
        if self.legend_games == 0:
            return 0.0
        return self.legend_wins_at / self.legend_games

    @property
    def rank(self) -> int:
        return tier_to_rank(self.tier_points)


class Population:
    """Ordered, fixed-size set of players.

    Position is identity: the simulation loop uses it as the round-robin
    cursor and the matchmaker scans it in order, so the order the players
    were added in decides tie-breaks.
    """

    def __init__(self, players: Sequence[Player] = ()):
        self._players: List[Player] = list(players)

    def __len__(self) -> int:
        return len(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    @property
    def ratings(self) -> np.ndarray:
        return np.array([p.skill_rating for p in self._players], dtype=float)

    @property
    def tier_points(self) -> np.ndarray:
        return np.array([p.tier_points for p in self._players], dtype=int)

    @property
    def legend_count(self) -> int:
        return sum(1 for p in self._players if p.is_legend)


# --- Rank Table ---

def _build_rank_table() -> tuple:
    # Rank 25 starts with an extra zero-star slot, then each band of ranks
    # needs a fixed number of stars per rank.
    table = [25]
    for ranks, stars_per_rank in ((range(25, 20, -1), 2),
                                  (range(20, 15, -1), 3),
                                  (range(15, 10, -1), 4),
                                  (range(10, 0, -1), 5)):
        for rank in ranks:
            table.extend([rank] * stars_per_rank)
    return tuple(table)


RANK_TABLE = _build_rank_table() # Indexed by tier points 0..95


def tier_to_rank(tier_points: int) -> int:
    if tier_points < 0:
        return RANK_TABLE[0]
    if tier_points >= len(RANK_TABLE):
        return 0 # Legend
    return RANK_TABLE[tier_points]


# --- Progression ---

def apply_match_result(player: Player, did_win: bool, opponent: Optional[Player] = None,
                       rules: Optional[LadderConfig] = None) -> None:
    """Update one player's stars, streak and counters after a match.

    The opponent is accepted so callers can pass both sides symmetrically, but
    the star rule does not depend on it while ratings stay frozen.
    """
    rules = rules or DEFAULT_LADDER_CONFIG
    starting_points = player.tier_points

    if did_win:
        player.wins += 1
        player.win_streak += 1
        player.tier_points += 1
        # Bonus star for a win streak, only up to the rank 5 boundary
        if player.win_streak >= rules.streak_bonus_min and starting_points <= rules.streak_bonus_max_points:
            player.tier_points += 1
    else:
        player.losses += 1
        player.win_streak = 0
        # Base legends keep their floor
        if player.tier_points > rules.loss_floor and player.tier_points != rules.legend_floor:
            player.tier_points -= 1

    if player.tier_points > rules.legend_threshold and starting_points <= rules.legend_threshold:
        player.legend_wins_at = player.wins
        player.legend_losses_at = player.losses


# --- Win Probability ---

Rating = Union[float, np.ndarray]


def expected_score(rating_a: Rating, rating_b: Rating) -> Rating:
    # Huge gaps overflow to inf, which still gives the right 0.0 limit
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.power(10.0, (np.asarray(rating_b, dtype=float) - rating_a) / 400.0))


def win_probability(rating_a: Rating, rating_b: Rating, fudge_factor: float = 0.05) -> Rating:
    """Probability that A beats B, clamped to [fudge, 1 - fudge].

    The clamp stands in for the luck in each game: no matchup is ever a
    guaranteed win or a guaranteed loss.
    """
    p = np.clip(expected_score(rating_a, rating_b), fudge_factor, 1.0 - fudge_factor)
    if np.ndim(p) == 0:
        return float(p)
    return p


# --- Randomness ---

class OutcomeSampler:
    """Single random stream shared by everything in one run."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def random(self) -> float:
        return float(self.rng.random())

    def sample_win(self, p: float) -> bool:
        return self.random() < p

    def normal(self, mean: float, std: float, size: int) -> np.ndarray:
        return self.rng.normal(mean, std, size)


# --- Matchmaking ---

class Matchmaker:
    def __init__(self, config: Optional[LadderConfig] = None):
        self.config = config or DEFAULT_LADDER_CONFIG

    def find_opponent(self, population: Population, focal_index: int) -> Optional[int]:
        """Nearest-stars opponent for the player at focal_index, or None.

        Scans every other player once, starting just after the focal player
        and wrapping around. Ties go to the first candidate found. Returns
        None when the focal player is a legend or the closest gap is wider
        than the match window.
        """
        size = len(population)
        if size < 2:
            raise InsufficientPopulation(f"Need at least 2 players to matchmake, have {size}")
        if not 0 <= focal_index < size:
            raise IndexError(f"focal_index {focal_index} out of range for {size} players")

        focal = population[focal_index]
        if self.config.is_legend(focal):
            return None

        best_pos = None
        best_diff = None
        pos = focal_index
        # size - 1 so the player never meets themselves
        for _ in range(size - 1):
            pos = (pos + 1) % size
            diff = abs(focal.tier_points - population[pos].tier_points)
            if best_diff is None or diff < best_diff:
                best_diff = diff
                best_pos = pos
            if best_diff == 0:
                break

        if best_diff > self.config.match_window:
            logger.debug("No close match for player %d (closest gap %d)", focal_index, best_diff)
            return None
        return best_pos


# --- Population ---

def _check_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {value}")


def generate_population(n: int, seed: Optional[int] = None, sampler: Optional[OutcomeSampler] = None,
                        rating_config: Optional[RatingConfig] = None) -> Population:
    _check_count("Population size", n)
    rating_config = rating_config or RatingConfig()
    sampler = sampler if sampler is not None else OutcomeSampler(seed)

    ratings = sampler.normal(rating_config.mean, rating_config.std, n)
    np.clip(ratings, rating_config.min_rating, rating_config.max_rating, out=ratings)

    logger.info("Generated %d players (rating %.1f - %.1f)", n, ratings.min(), ratings.max())
    return Population([Player(skill_rating=float(r)) for r in ratings])


# --- Simulation Loop ---

class LadderSimulation:
    def __init__(self, population: Population, sampler: Optional[OutcomeSampler] = None,
                 config: Optional[LadderConfig] = None):
        self.population = population
        self.sampler = sampler if sampler is not None else OutcomeSampler()
        self.config = config or DEFAULT_LADDER_CONFIG
        self.matchmaker = Matchmaker(self.config)

        self.cursor = 0 # Next focal player
        self.ticks = 0
        self.games_played = 0
        self.skipped_legend = 0
        self.skipped_no_opponent = 0

    def play_single_game(self, player_index: int) -> bool:
        """One tick with player_index as the focal player. True if a game was played."""
        p1 = self.population[player_index]

        # Legends don't queue any more, unless picked as someone else's opponent
        if self.config.is_legend(p1):
            self.skipped_legend += 1
            return False

        opp_index = self.matchmaker.find_opponent(self.population, player_index)
        if opp_index is None:
            self.skipped_no_opponent += 1
            return False

        p2 = self.population[opp_index]
        prob_p1 = win_probability(p1.skill_rating, p2.skill_rating, self.config.fudge_factor)
        p1_wins = self.sampler.sample_win(prob_p1)

        apply_match_result(p1, p1_wins, p2, self.config)
        apply_match_result(p2, not p1_wins, p1, self.config)

        self.games_played += 1
        return True

    def run(self, num_matches: int) -> int:
        """Run num_matches ticks in round-robin order. Returns games played in this call."""
        _check_count("num_matches", num_matches)

        size = len(self.population)
        if size < 2:
            raise InsufficientPopulation(f"Need at least 2 players to run the ladder, have {size}")
        games_before = self.games_played
        logger.info("Running %d ticks over %d players", num_matches, size)

        for _ in range(num_matches):
            self.play_single_game(self.cursor)
            # Everyone takes a turn regardless of results
            self.cursor = (self.cursor + 1) % size
            self.ticks += 1

        played = self.games_played - games_before
        logger.info("Played %d games (%d legend skips, %d no-match skips so far)",
                    played, self.skipped_legend, self.skipped_no_opponent)
        return played

    def get_stats(self):
        ratings = self.population.ratings
        points = self.population.tier_points
        return {
            "ticks": self.ticks,
            "games_played": self.games_played,
            "skipped_legend": self.skipped_legend,
            "skipped_no_opponent": self.skipped_no_opponent,
            "legend_count": sum(1 for p in self.population if self.config.is_legend(p)),
            "min_rating": float(np.min(ratings)),
            "max_rating": float(np.max(ratings)),
            "avg_tier_points": float(np.mean(points)),
        }


def run_ladder(population: Population, num_matches: int, sampler: Optional[OutcomeSampler] = None,
               seed: Optional[int] = None, config: Optional[LadderConfig] = None) -> int:
    _check_count("num_matches", num_matches)
    if sampler is None:
        sampler = OutcomeSampler(seed)
    sim = LadderSimulation(population, sampler, config)
    return sim.run(num_matches)


DEFAULT_LADDER_CONFIG = LadderConfig()
