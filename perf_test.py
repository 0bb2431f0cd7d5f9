from ladder_core import LadderSimulation, OutcomeSampler, generate_population
import time

def run_perf_test(num_players, num_ticks):
    print(f"\n--- Testing with {num_players:,} players, {num_ticks:,} ticks ---")

    sampler = OutcomeSampler(1)

    start_init = time.time()
    population = generate_population(num_players, sampler=sampler)
    init_time = time.time() - start_init
    print(f"Initialization: {init_time:.4f}s")

    sim = LadderSimulation(population, sampler)
    start_run = time.time()
    played = sim.run(num_ticks)
    run_time = time.time() - start_run
    print(f"Run: {run_time:.4f}s ({played:,} games, {num_ticks / max(run_time, 1e-9):,.0f} ticks/s)")

    return run_time

if __name__ == "__main__":
    # Warmup
    run_perf_test(100, 10000)

    t_1k = run_perf_test(1000, 100000)

    # Only run the big one if 1k was fast enough
    if t_1k < 5.0:
        run_perf_test(10000, 1000000)
    else:
        print("Skipping 10k test as 1k took > 5s")
