import numpy as np
import pandas as pd

from ladder_core import Population

FRAME_COLUMNS = [
    "rating", "wins", "losses", "tier_points", "rank", "legend",
    "legend_wins", "legend_losses", "legend_games", "legend_win_rate",
]


def population_frame(population: Population) -> pd.DataFrame:
    """One row per player, ordered by wins needed to reach legend.

    Players who never made legend have legend_wins == 0, so they sort first,
    the same as the raw dump. The index keeps the population position.
    """
    rows = []
    for p in population:
        rows.append({
            "rating": p.skill_rating,
            "wins": p.wins,
            "losses": p.losses,
            "tier_points": p.tier_points,
            "rank": p.rank,
            "legend": p.is_legend,
            "legend_wins": p.legend_wins_at,
            "legend_losses": p.legend_losses_at,
            "legend_games": p.legend_games,
            "legend_win_rate": p.legend_win_rate,
        })
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    return df.sort_values("legend_wins", kind="stable")


def summarize(population: Population):
    df = population_frame(population)
    legends = df[df["legend"]]

    summary = {
        "players": len(df),
        "legend_count": int(len(legends)),
        "legend_fraction": float(len(legends) / len(df)) if len(df) else 0.0,
        "min_rating": float(df["rating"].min()) if len(df) else np.nan,
        "max_rating": float(df["rating"].max()) if len(df) else np.nan,
        "best_legend_wins": None,
        "best_legend_losses": None,
        "best_legend_rating": None,
    }

    if len(legends):
        best = legends.loc[legends["legend_wins"].idxmin()]
        summary["best_legend_wins"] = int(best["legend_wins"])
        summary["best_legend_losses"] = int(best["legend_losses"])
        summary["best_legend_rating"] = float(best["rating"])
    return summary


def rank_distribution(population: Population) -> pd.Series:
    """Players per rank, from rank 25 down to legend (0)."""
    ranks = pd.Series([p.rank for p in population], dtype=int)
    return ranks.value_counts().reindex(range(25, -1, -1), fill_value=0).rename("players")


def format_summary(summary, games_played: int) -> str:
    lines = [
        f"Played {games_played} games",
        f"{summary['players']} players",
        f"{summary['legend_count']} hit legend ({summary['legend_fraction']:.1%})",
    ]
    if summary["best_legend_wins"] is not None:
        lines.append(
            f"Fastest legend: {summary['best_legend_wins']} wins / {summary['best_legend_losses']} losses"
            f" (rating {summary['best_legend_rating']:.1f})"
        )
    lines.append(f"minRating={summary['min_rating']:.1f}")
    lines.append(f"maxRating={summary['max_rating']:.1f}")
    return "\n".join(lines)
