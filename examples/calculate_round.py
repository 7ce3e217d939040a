"""Quick chamber calculator for a live game session.

Edit the shell counts, known chambers and players below, then run:
    python examples/calculate_round.py
"""

import sys
import pathlib

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import buckshot
import compute_probabilities
import round_tracker


def main() -> None:
    # ── Shells left in the magazine ────────────────────────────
    live = 3
    blank = 2

    # ── Chambers in firing order ───────────────────────────────
    # ? = unknown, L = known live, B = known blank.
    # Magnifying Glass reveals #1, Burner Phone reveals any later one.
    chambers = "? ? L ? ?"

    # ── Players ────────────────────────────────────────────────
    players = [
        buckshot.Player(id=1, name="YOU", hp=3, max_hp=4, skill=0, is_user=True),
        buckshot.Player(id=2, name="DEALER", hp=2, max_hp=4, skill=3),
        # buckshot.Player(id=3, name="OPPONENT 3", hp=1, max_hp=4, skill=3),
    ]

    # ── Create round state ─────────────────────────────────────
    tracker = round_tracker.RoundTracker.from_string(
        live, blank, chambers, players=players,
    )

    # ── Display & analysis ─────────────────────────────────────
    print(tracker)
    print()
    compute_probabilities.print_chamber_analysis(
        tracker.live_shells, tracker.blank_shells, tracker.chambers,
    )
    print()
    compute_probabilities.print_recommendation(tracker.recommendation)


if __name__ == "__main__":
    main()
