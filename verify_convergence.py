from ladder_core import LadderSimulation, OutcomeSampler, generate_population
from ladder_report import summarize
import numpy as np

def run_convergence_test():
    print("Starting Legend Convergence Test...")

    # 1000 players, ~1000 games each by the end
    num_players = 1000
    blocks = 10
    ticks_per_block = 100000

    sampler = OutcomeSampler(20140720)
    population = generate_population(num_players, sampler=sampler)
    sim = LadderSimulation(population, sampler)

    legend_history = []

    print(f"Simulating {blocks * ticks_per_block:,} ticks...")
    for b in range(blocks):
        sim.run(ticks_per_block)
        legend_history.append(population.legend_count)

        stats = sim.get_stats()
        print(f"Tick {sim.ticks:>9,}: Legends = {stats['legend_count']} "
              f"(Avg Stars: {stats['avg_tier_points']:.2f}, No-match skips: {stats['skipped_no_opponent']})")

    summary = summarize(population)
    print(f"Final Legend Fraction: {summary['legend_fraction']:.2%}")

    # Legend is absorbing, so the count can only grow
    if all(a <= b for a, b in zip(legend_history, legend_history[1:])):
        print("SUCCESS: Legend count is monotonic.")
    else:
        print("FAILURE: Legend count went down.")

    # Stronger players should get there more often
    ratings = population.ratings
    is_legend = np.array([p.is_legend for p in population])
    if is_legend.any() and (~is_legend).any():
        print(f"Avg rating legends: {ratings[is_legend].mean():.1f} / others: {ratings[~is_legend].mean():.1f}")

if __name__ == "__main__":
    run_convergence_test()
