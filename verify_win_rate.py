from ladder_core import OutcomeSampler, expected_score, win_probability

def verify_win_rate():
    print("--- Win Rate Verification (Rating Gaps) ---")

    sampler = OutcomeSampler(2014)
    n_matches = 20000

    for gap in [0, 100, 200, 400, 600, 800, 1200]:
        rating_a = 1500.0 + gap
        rating_b = 1500.0

        raw = expected_score(rating_a, rating_b)
        p = win_probability(rating_a, rating_b)

        wins = sum(sampler.sample_win(p) for _ in range(n_matches))
        observed = wins / n_matches

        clamped = " (clamped)" if raw > p else ""
        print(f"Gap {gap:5d}: Pure ELO {raw:.4f} -> Used {p:.4f}{clamped} | Simulated {observed:.4f}")

        if abs(observed - p) > 0.02:
            print(f"FAILURE: Simulated win rate off by {observed - p:+.4f}")

    # The favourite can never be more than 95% safe
    if win_probability(2900.0, 100.0) <= 0.95:
        print("SUCCESS: Win probability ceiling holds.")
    else:
        print("FAILURE: Win probability above ceiling.")

if __name__ == "__main__":
    verify_win_rate()
