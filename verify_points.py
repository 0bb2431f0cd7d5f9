from ladder_core import Player, apply_match_result

def test_points():
    print("--- Verifying Star Progression ---")

    # Win streak from rank 25: 1, 1, then bonus stars from the 3rd win
    player = Player(skill_rating=1500.0)
    expected = [1, 2, 4, 6, 8]
    for i, target in enumerate(expected):
        apply_match_result(player, True)
        print(f"Win {i + 1}: Stars {player.tier_points} (Rank {player.rank}, Streak {player.win_streak})")
        if player.tier_points != target:
            print(f"FAILURE: Expected {target}, got {player.tier_points}")
            return

    # Losses below rank 20 cost nothing
    apply_match_result(player, False)
    print(f"Loss: Stars {player.tier_points} (Streak {player.win_streak})")
    if player.tier_points != 8:
        print("FAILURE: Lost a star below rank 20")
        return

    # Climb to the edge of legend and over
    player.tier_points = 95
    apply_match_result(player, True)
    print(f"Win at 95: Stars {player.tier_points}, Legend={player.is_legend}, "
          f"LegendAt={player.legend_wins_at}W/{player.legend_losses_at}L")

    apply_match_result(player, False)
    if player.tier_points == 96 and player.legend_wins_at == 6:
        print("SUCCESS: Stars progress correctly.")
    else:
        print(f"FAILURE: Stars {player.tier_points}, legend wins {player.legend_wins_at}")

if __name__ == "__main__":
    test_points()
